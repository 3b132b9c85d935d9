# Importing a list type module registers its converter, schema, summary and renderer
from cath.list_types import care_standards_tribunal, sjp  # noqa: F401
