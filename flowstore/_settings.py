from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._listeners import ListenerErrorPolicy


__all__ = (
    "StoreSettings",

    "get_settings"
)


class StoreSettings(BaseSettings):
    """Defaults applied to every store unless overridden at construction.

    Environment variables:
        - FLOWSTORE_LISTENER_ERROR_POLICY: collect / propagate / log
        - FLOWSTORE_CHECK_ACTION_TYPES: reject actions of the wrong type
        - FLOWSTORE_COPY_ON_READ: hand out copies from get_state()
    """

    listener_error_policy: ListenerErrorPolicy = Field(
        default=ListenerErrorPolicy.COLLECT,
        description="What dispatch does when a listener raises"
    )
    check_action_types: bool = Field(
        default=True,
        description="Check actions against the reducer's action type"
    )
    copy_on_read: bool = Field(
        default=True,
        description="Return a copy of the state from get_state()"
    )

    model_config = SettingsConfigDict(
        env_prefix="FLOWSTORE_",
        extra="ignore"
    )


@lru_cache
def get_settings() -> StoreSettings:
    return StoreSettings()
