"""Registry-based decoding of discriminated variant families.

A variant family is a set of pydantic models that share a base class and
are told apart by a string tag in the payload (``type`` for keystores,
``keystore.type`` for key instances, ``ibm_variant`` inside the IBM Cloud
KMS branch). Each family owns a :class:`VariantRegistry`; model modules
register their concrete classes against it and new vendors can be added
the same way without touching the dispatch code.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from keyorchestrator.domain.models.errors import (
    FieldDecodeError,
    MissingDiscriminatorError,
    UnrecognizedVariantError,
)

ModelT = TypeVar("ModelT", bound=BaseModel)
VariantT = TypeVar("VariantT", bound=BaseModel)

ROOT_FIELD = "<root>"


def decode_model(model_cls: type[ModelT], raw: Any) -> ModelT:
    """Decode a JSON object into a model, translating validation failures.

    Args:
        model_cls: Target pydantic model class.
        raw: Parsed JSON value, expected to be an object.

    Returns:
        Fully populated model instance.

    Raises:
        FieldDecodeError: If the value is not an object or any field fails
            to decode. The first failing field is reported.
    """
    if not isinstance(raw, Mapping):
        raise FieldDecodeError(
            ROOT_FIELD,
            f"expected a JSON object, got {type(raw).__name__}",
        )

    try:
        return model_cls.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise field_error_from_validation(e) from e


def field_error_from_validation(
    error: PydanticValidationError, prefix: str | None = None
) -> FieldDecodeError:
    """Build a FieldDecodeError naming the first failing field.

    Args:
        error: Validation error raised by pydantic.
        prefix: Optional dotted path to prepend, for nested decodes.

    Returns:
        FieldDecodeError with a dotted field path and the pydantic message.
    """
    details = error.errors()
    if not details:
        return FieldDecodeError(prefix or ROOT_FIELD, str(error))

    first = details[0]
    path = ".".join(str(part) for part in first.get("loc", ()))
    if prefix:
        path = f"{prefix}.{path}" if path else prefix
    return FieldDecodeError(path or ROOT_FIELD, first.get("msg", str(error)))


class VariantRegistry(Generic[ModelT]):
    """Maps discriminator tags to the concrete models of one family.

    Example:
        ```python
        KEYSTORE_VARIANTS = VariantRegistry("Keystore", base=Keystore)

        @KEYSTORE_VARIANTS.register("aws_kms")
        class KeystoreTypeAwsKms(Keystore):
            ...

        keystore = KEYSTORE_VARIANTS.decode({"type": "aws_kms", ...})
        ```
    """

    def __init__(
        self,
        family: str,
        discriminator: str = "type",
        base: type[ModelT] | None = None,
    ) -> None:
        """Initialize VariantRegistry.

        Args:
            family: Family name used in error messages.
            discriminator: Tag field, or a dotted path into nested objects.
            base: Optional base shape for undiscriminated decoding.
        """
        self.family = family
        self.discriminator = discriminator
        self.base = base
        self._variants: dict[str, type[ModelT]] = {}

    def register(self, tag: str) -> Callable[[type[VariantT]], type[VariantT]]:
        """Class decorator adding a variant under ``tag``.

        A class may be registered under several tags.

        Raises:
            ValueError: If the tag is empty or already taken by another class.
        """
        if not tag:
            raise ValueError(f"Variant tag for {self.family} cannot be empty")

        def decorator(cls: type[VariantT]) -> type[VariantT]:
            existing = self._variants.get(tag)
            if existing is not None and existing is not cls:
                raise ValueError(
                    f"{self.family} tag {tag!r} already registered to {existing.__name__}"
                )
            self._variants[tag] = cls  # type: ignore[assignment]
            return cls

        return decorator

    def tags(self) -> list[str]:
        """Registered tags, in registration order."""
        return list(self._variants)

    def variant_for(self, tag: str) -> type[ModelT]:
        """Return the class registered for ``tag``.

        Raises:
            UnrecognizedVariantError: If the tag is unknown.
        """
        try:
            return self._variants[tag]
        except KeyError:
            raise UnrecognizedVariantError(self.family, self.discriminator, tag) from None

    def __contains__(self, tag: object) -> bool:
        return tag in self._variants

    def read_tag(self, raw: Mapping[str, Any]) -> str:
        """Read the discriminator value from a payload.

        Raises:
            MissingDiscriminatorError: If the tag is absent, null or empty.
            FieldDecodeError: If the tag is present but not a string.
        """
        value: Any = raw
        for part in self.discriminator.split("."):
            if not isinstance(value, Mapping) or value.get(part) is None:
                raise MissingDiscriminatorError(self.family, self.discriminator)
            value = value[part]

        if not isinstance(value, str):
            raise FieldDecodeError(
                self.discriminator,
                f"discriminator must be a string, got {type(value).__name__}",
            )
        if not value:
            raise MissingDiscriminatorError(self.family, self.discriminator)
        return value

    def decode(self, raw: Any) -> ModelT:
        """Decode a payload into the variant its discriminator names.

        Args:
            raw: Parsed JSON object.

        Returns:
            Instance of the registered variant class.

        Raises:
            FieldDecodeError: If the payload is not an object or a field fails.
            MissingDiscriminatorError: If the discriminator is absent or empty.
            UnrecognizedVariantError: If no variant is registered for the tag.
        """
        if not isinstance(raw, Mapping):
            raise FieldDecodeError(
                ROOT_FIELD,
                f"expected a JSON object, got {type(raw).__name__}",
            )

        tag = self.read_tag(raw)
        return decode_model(self.variant_for(tag), raw)

    def decode_base(self, raw: Any) -> ModelT:
        """Decode a payload into the family's base shape without dispatching.

        Raises:
            TypeError: If the registry has no base shape.
            FieldDecodeError: If the payload is not an object or a field fails.
        """
        if self.base is None:
            raise TypeError(f"{self.family} has no base shape")
        return decode_model(self.base, raw)

    def decode_list(self, raw: Any, field: str) -> list[ModelT]:
        """Decode a JSON array of variants, prefixing errors with the index.

        Args:
            raw: Parsed JSON array, or None.
            field: Name of the containing field, used in error paths.
        """
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise FieldDecodeError(field, f"expected a JSON array, got {type(raw).__name__}")

        decoded: list[ModelT] = []
        for index, item in enumerate(raw):
            if isinstance(item, BaseModel):
                decoded.append(item)  # type: ignore[arg-type]
                continue
            try:
                decoded.append(self.decode(item))
            except FieldDecodeError as e:
                path = f"{field}.{index}" if e.field == ROOT_FIELD else f"{field}.{index}.{e.field}"
                raise FieldDecodeError(path, e.cause) from e
        return decoded

    def __repr__(self) -> str:
        return (
            f"VariantRegistry(family={self.family!r}, "
            f"discriminator={self.discriminator!r}, tags={self.tags()!r})"
        )
