# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Typed view over the ``GET /api/v1/bots/{id}`` payload."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ModelBotStats(BaseModel):
    """Stats block of a bot listing."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    servers: int = 0
    users: int = 0
    shards: int = 0
    votes: int = 0
    monthly_votes: int = Field(default=0, alias="monthlyVotes")
    rating: float = 0.0
    reviews: int = 0
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")


class ModelBotInfo(BaseModel):
    """A bot as listed on BotGate.

    Unknown fields are ignored so new server fields never break parsing.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str
    avatar: str | None = None
    discriminator: str | None = None
    short_description: str | None = Field(default=None, alias="shortDescription")
    tagline: str | None = None
    prefix: str | None = None
    verified: bool = False
    premium: bool = False
    certified: bool = False
    status: Literal["pending", "approved", "rejected", "banned"] | None = None
    stats: ModelBotStats = Field(default_factory=ModelBotStats)
    created_at: datetime | None = Field(default=None, alias="createdAt")
    approved_at: datetime | None = Field(default=None, alias="approvedAt")


__all__: list[str] = ["ModelBotInfo", "ModelBotStats"]
