from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


# Upstream GitHub payloads. Only the fields the aggregator reads are declared;
# everything else in the REST response is ignored.


class GitHubProfile(BaseModel):
    login: str
    avatar_url: str = ""
    bio: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    followers: int = 0
    following: int = 0
    public_repos: int = 0

    @field_validator("avatar_url", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("followers", "following", "public_repos", mode="before")
    @classmethod
    def _none_to_zero(cls, v):
        return 0 if v is None else v


class GitHubRepository(BaseModel):
    name: str
    description: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    language: Optional[str] = None

    @field_validator("stargazers_count", "forks_count", mode="before")
    @classmethod
    def _none_to_zero(cls, v):
        return 0 if v is None else v


class GitHubEvent(BaseModel):
    type: str
    created_at: dt.datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, v: dt.datetime) -> dt.datetime:
        # GitHub timestamps are UTC even when the offset is missing
        if v.tzinfo is None:
            return v.replace(tzinfo=dt.timezone.utc)
        return v


# API output. Serialized with camelCase keys for the frontend.


class _Out(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Language(_Out):
    name: str
    percent: int
    color: str


class TopRepository(_Out):
    name: str
    description: str
    stars: int
    forks: int
    language: str
    language_color: str


class ContributionType(_Out):
    label: str
    value: int
    color: str


class MonthlyActivity(_Out):
    month: str
    value: int


class Stats(_Out):
    commits: int
    repos: int
    stars_received: int
    forks: int
    top_languages: List[Language]
    top_repositories: List[TopRepository]
    busiest_day: str
    busiest_time: str
    longest_streak: int
    personality: str
    personality_desc: str
    monthly_activity: List[MonthlyActivity]
    contribution_breakdown: List[ContributionType]


class ProfileSummary(_Out):
    bio: str
    location: str
    joined: str
    followers: int
    following: int


class WrappedReport(_Out):
    username: str
    avatar: str
    year: int
    profile: ProfileSummary
    stats: Stats


class ErrorOut(BaseModel):
    error: str
