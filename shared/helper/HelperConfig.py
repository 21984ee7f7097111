"""Central configuration helper for the search scroll bridge."""

import logging
import os
from typing import Any


class HelperConfig:
    """Reads typed settings from environment variables.

    Keys are case-insensitive. An unset or blank variable falls back to the
    given default; with no default it is a configuration error.
    """

    def __init__(self, logger: logging.Logger | Any) -> None:
        self._logger = logger

    def _read_raw(self, key: str) -> str | None:
        """Return the stripped value of an env var, or None when unset or blank."""
        return (os.getenv(key.upper()) or "").strip() or None

    def _missing(self, key: str) -> ValueError:
        return ValueError(f"Environment variable '{key.upper()}' is not set.")

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        raw = self._read_raw(key)
        if raw is not None:
            return raw
        if default is None:
            raise self._missing(key)
        return default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric environment variable. "10" gives an int, "2.5" a float.

        Raises:
            ValueError: If the variable is not set and no default is provided,
                        or the value is not a number.
        """
        raw = self._read_raw(key)
        if raw is None:
            if default is None:
                raise self._missing(key)
            return default
        try:
            return float(raw) if "." in raw else int(raw)
        except ValueError:
            raise ValueError(f"Environment variable '{key.upper()}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a boolean environment variable. "true", "1" and "yes" count as True.

        Raises:
            ValueError: If the variable is not set and no default is provided.
        """
        raw = self._read_raw(key)
        if raw is None:
            if default is None:
                raise self._missing(key)
            return default
        return raw.lower() in ("true", "1", "yes")

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",", element_type: type = str) -> list:
        """Read a bracketed list environment variable, e.g. "[elasticsearch,opensearch]".

        Args:
            key (str): Environment variable name (case-insensitive).
            default (list[str] | None): Fallback value if the variable is not set.
            separator (str): Delimiter between elements.
            element_type (type): Type each element is cast to.

        Returns:
            list: The elements, stripped, with blank ones dropped.

        Raises:
            ValueError: If the variable is not set and no default is provided,
                        is not bracketed, or an element cannot be cast.
        """
        raw = self._read_raw(key)
        if raw is None:
            if default is None:
                raise self._missing(key)
            return default
        if not (raw.startswith("[") and raw.endswith("]")):
            raise ValueError(f"Environment variable '{key.upper()}' must look like '[a{separator}b]', got '{raw}'.")
        elements = [item.strip() for item in raw[1:-1].split(separator) if item.strip()]
        try:
            return [element_type(item) for item in elements]
        except ValueError as e:
            raise ValueError(f"Environment variable '{key.upper()}' has an element that is not {element_type.__name__}: {e}")

    def get_logger(self) -> logging.Logger | Any:
        """Return the application logger."""
        return self._logger
