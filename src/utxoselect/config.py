"""
Selector configuration using pydantic-settings.

Every field can be set through the environment with the UTXOSELECT_ prefix,
e.g. UTXOSELECT_POLICY=first_success or UTXOSELECT_ALGORITHMS='["bnb","srd"]'.
No dotenv file is read unless the application passes one explicitly,
e.g. SelectorSettings(_env_file=".env").
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utxoselect.constants import BNB_MAX_TRIES, KNAPSACK_ITERATIONS
from utxoselect.models import Algorithm, SelectionPolicy


class SelectorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UTXOSELECT_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    algorithms: list[Algorithm] = Field(
        default_factory=lambda: list(Algorithm),
        description="Algorithms to run, in priority order",
    )
    policy: SelectionPolicy = SelectionPolicy.MINIMIZE_WASTE
    seed: int | None = Field(default=None, description="Seed for randomized algorithms")

    bnb_max_tries: int = Field(default=BNB_MAX_TRIES, ge=1)
    knapsack_iterations: int = Field(default=KNAPSACK_ITERATIONS, ge=1)

    log_level: str = "INFO"

    @field_validator("algorithms")
    @classmethod
    def validate_algorithms(cls, v: list[Algorithm]) -> list[Algorithm]:
        if not v:
            raise ValueError("At least one algorithm must be configured")
        # Keep first occurrence so priority order survives
        return list(dict.fromkeys(v))


def get_settings() -> SelectorSettings:
    return SelectorSettings()
