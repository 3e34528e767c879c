from marshmallow import Schema, ValidationError, fields, post_load, validate
from typing import Dict, Iterable, List

from insight_core.exceptions import SchemaValidationError
from insight_core.models import Entry, FactorType, Insight, Mark


class FactorTypeSchema(Schema):
    factor_id = fields.Str(required=True)
    name = fields.Str(load_default=None, allow_none=True)

    @post_load
    def make_factor_type(self, data, **kwargs):
        return FactorType(**data)


class MarkSchema(Schema):
    factor_type = fields.Nested(FactorTypeSchema, load_default=None, allow_none=True)

    @post_load
    def make_mark(self, data, **kwargs):
        return Mark(**data)


class EntrySchema(Schema):
    rating = fields.Float(required=True, allow_nan=False)
    date = fields.DateTime(load_default=None, allow_none=True)
    marks = fields.List(fields.Nested(MarkSchema), load_default=list)

    @post_load
    def make_entry(self, data, **kwargs):
        data['marks'] = tuple(data['marks'])
        return Entry(**data)


class InsightSchema(Schema):
    title = fields.Str(required=True)
    description = fields.Str(required=True)
    score = fields.Float(required=True, validate=validate.Range(min=0))

    @post_load
    def make_insight(self, data, **kwargs):
        return Insight(**data)


def load_entries(records: Iterable[Dict]) -> List[Entry]:
    """Load Entry objects from plain dicts (e.g. a JSON export of a card)."""
    try:
        return EntrySchema(many=True).load(list(records))
    except ValidationError as e:
        raise SchemaValidationError('EntrySchema', e.messages) from e


def dump_insights(insights: Iterable[Insight]) -> List[Dict]:
    return InsightSchema(many=True).dump(list(insights))
