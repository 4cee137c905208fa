from pydantic import BaseModel, ConfigDict, field_validator


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PayloadModel(BaseModel):
    """Base for request bodies: trims strings and stores enum values as plain text."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    @field_validator("keterangan", mode="before", check_fields=False)
    @classmethod
    def _blank_keterangan(cls, value):
        return blank_to_none(value)
