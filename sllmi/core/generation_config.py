from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling options shared by every provider.

    Each field is optional: ``None`` means "use the provider default", which
    is different from explicitly sending a value.
    """

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    output_length: Optional[int] = None

    def is_empty(self) -> bool:
        """Return True when no option is set."""
        return all(value is None for value in asdict(self).values())

    def to_params(self, names: dict[str, str]) -> dict[str, Any]:
        """Translate set fields to provider parameter names.

        Args:
            names: Mapping of field name to the provider's parameter name.

        Returns:
            Only the fields that are set, keyed by provider parameter name.
        """
        return {
            names[field_name]: value
            for field_name, value in asdict(self).items()
            if value is not None and field_name in names
        }
