"""
Settings for the Flash fake query builder.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Attribute names probed by common tooling (IPython display hooks, pytest
# fixture detection) that must never turn into recorded builder calls.
DEFAULT_PASSTHROUGH_NAMES = frozenset(
    {
        "_ipython_canary_method_should_not_exist_",
        "_ipython_display_",
        "_repr_html_",
        "_repr_mimebundle_",
        "_fixture_function_marker",
        "_pytestfixturefunction",
    }
)


class FakeQuerySettings(BaseSettings):
    """
    Behaviour switches for FakeQuery instances.

    Values can be overridden through environment variables prefixed with
    ``FAKE_QUERY_`` or through a local ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FAKE_QUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Dispatch ---
    # Dunder names are always passed through; these are checked in addition.
    PASSTHROUGH_NAMES: set[str] = set(DEFAULT_PASSTHROUGH_NAMES)

    # --- Diagnostics ---
    LOG_CALLS: bool = False

    @field_validator("PASSTHROUGH_NAMES")
    @classmethod
    def reject_dunder_names(cls, value: set[str]) -> set[str]:
        """Dunder names are handled by the builder itself and can't be listed."""
        dunders = sorted(n for n in value if n.startswith("__") and n.endswith("__"))
        if dunders:
            msg = f"Dunder names are always passed through: {', '.join(dunders)}"
            raise ValueError(msg)
        return value

    def is_passthrough(self, name: str) -> bool:
        return (name.startswith("__") and name.endswith("__")) or (
            name in self.PASSTHROUGH_NAMES
        )


# Singleton instance used when no explicit settings are given
fake_query_settings = FakeQuerySettings()
