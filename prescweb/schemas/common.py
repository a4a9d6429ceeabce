# prescweb/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for every API schema.

    The browser frontend speaks camelCase JSON; Python code uses snake_case
    attribute names. Both spellings are accepted on input, responses are
    emitted with camelCase keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str
