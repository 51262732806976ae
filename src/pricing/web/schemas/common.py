"""Common Pydantic schemas shared across requests and responses."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase wire names.

    Snake_case field names are accepted too, so Python callers can build
    instances directly.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
