from typing import Literal

from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter a client reads from the environment.

    Attributes:
        env_key (str): The key of the environment variable, without the client prefix (e.g. "BASE_URL").
        val_type (str): The expected type of the value: "string", "number", "bool" or "list".
        default (str | int | float | bool | list | None): Value used if the variable is not set. If None, the variable is required.
    """

    env_key: str
    val_type: Literal["string", "number", "bool", "list"]
    default: str | int | float | bool | list | None = None
