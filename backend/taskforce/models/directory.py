"""Directory tables and views (read side).

Array columns are PostgreSQL ARRAY; on SQLite they fall back to JSON and
dates to ISO strings so the repository can be exercised in-memory.
"""
from sqlalchemy import Boolean, Column, Date, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.sql import func

from ..database import Base

StringArray = ARRAY(String).with_variant(JSON(), "sqlite")
IntArray = ARRAY(Integer).with_variant(JSON(), "sqlite")
IsoDate = Date().with_variant(String(10), "sqlite")


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True)
    slug = Column(String(200), index=True)
    name = Column(String(300), nullable=False)
    description = Column(Text)
    category = Column(String(50), index=True)  # environmental | humanitarian
    status = Column(String(20), default="pending", index=True)  # pending, approved, rejected

    place_name = Column(String(300))
    region = Column(String(100))
    country = Column(String(100), index=True)
    lat = Column(Float)
    lng = Column(Float)

    start_date = Column(IsoDate)
    end_date = Column(IsoDate)

    donations_received = Column(Float)
    amount_needed = Column(Float)
    currency = Column(String(3))
    lives_improved = Column(Integer)

    thematic_area = Column(StringArray)
    type_of_intervention = Column(StringArray)
    partner_org_ids = Column(StringArray)
    target_demographic = Column(String(100))

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class OrganisationDirectoryEntry(Base):
    """Row of the organisations_directory_v1 view (aggregates per organisation)."""

    __tablename__ = "organisations_directory_v1"

    id = Column(String(36), primary_key=True)
    name = Column(String(300))
    description = Column(Text)
    website = Column(String(500))
    based_in_country = Column(String(100))
    based_in_region = Column(String(100))
    thematic_tags = Column(StringArray)
    intervention_tags = Column(StringArray)
    demographic_tags = Column(StringArray)
    funding_needed = Column(Float)
    founded_at = Column(IsoDate)
    age_years = Column(Integer)
    followers_count = Column(Integer)
    projects_total_count = Column(Integer)
    projects_ongoing_count = Column(Integer)
    lat = Column(Float)
    lng = Column(Float)


class Organisation(Base):
    __tablename__ = "organisations"

    id = Column(String(36), primary_key=True)
    name = Column(String(300), nullable=False)
    logo_url = Column(String(500))
    country_based = Column(String(100))
    verification_status = Column(String(20), default="pending", index=True)


class Grant(Base):
    __tablename__ = "grants"

    id = Column(String(36), primary_key=True)
    slug = Column(String(200), index=True)
    title = Column(String(300), nullable=False)
    summary = Column(Text)
    funder_name = Column(String(300))
    funding_type = Column(String(50))
    project_type = Column(String(50))
    currency = Column(String(3))
    amount_min = Column(Float)
    amount_max = Column(Float)
    deadline = Column(IsoDate)
    open_date = Column(IsoDate)
    eligible_countries = Column(StringArray)
    themes = Column(StringArray)
    sdgs = Column(IntArray)
    remote_ok = Column(Boolean, default=False)
    location_name = Column(String(300))
    latitude = Column(Float)
    longitude = Column(Float)
    status = Column(String(20), default="open", index=True)  # open, rolling, closed
    is_published = Column(Boolean, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class WatchdogIssue(Base):
    __tablename__ = "watchdog_issues"

    id = Column(String(36), primary_key=True)
    title = Column(String(300), nullable=False)
    description = Column(Text)
    country = Column(String(100))
    region = Column(String(100))
    city = Column(String(100))
    latitude = Column(Float)
    longitude = Column(Float)
    sdgs = Column(IntArray)
    global_challenges = Column(StringArray)
    affected_demographics = Column(StringArray)
    urgency = Column(Integer)
    date_observed = Column(IsoDate)
    status = Column(String(20), default="pending", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Sdg(Base):
    __tablename__ = "sdgs"

    id = Column(Integer, primary_key=True)
    name = Column(String(200))


class IfrcChallenge(Base):
    __tablename__ = "ifrc_challenges"

    id = Column(String(50), primary_key=True)
    name = Column(String(200))
