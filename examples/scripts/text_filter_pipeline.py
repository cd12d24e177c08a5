"""Text filter and expression filter steps over dict records.

Demonstrates: TextFilter discovering text fields from the first record,
ExpressionFilter for config-driven filters, OrderBy and Select.
"""

from dynquery import ExpressionFilter, OrderBy, Select, TextFilter

data = [
    {"id": 1, "title": "Quarterly budget review", "owner": "Finance", "priority": 2},
    {"id": 2, "title": "Onboarding checklist", "owner": "HR", "priority": 1},
    {"id": 3, "title": "Budget tooling migration", "owner": "IT", "priority": 3},
    {"id": 4, "title": "Office move", "owner": "Facilities", "priority": 2},
]

pipeline = (
    # "title" and "owner" are the text fields; "id" and "priority" are ignored
    TextFilter("udget")
    >> ExpressionFilter("priority >= @0 || owner == @1", 3, "Finance")
    >> OrderBy("priority", descending=True)
    >> Select(lambda r: r["title"])
)

print(pipeline.run(data))
# Output: ['Budget tooling migration', 'Quarterly budget review']
