from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for persisted records.

    Fields are snake_case in Python and camelCase on the wire, which is the
    shape bundles written by the legacy web client already have.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
