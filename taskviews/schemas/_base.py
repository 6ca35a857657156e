# File: /taskviews/schemas/_base.py | Version: 1.0 | Title: Pydantic Base Schema (camelCase wire format)
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    # Persisted tab state is camelCase JSON; Python code stays snake_case.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
