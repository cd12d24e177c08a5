"""Six ways to build filters at run time over in-memory records.

Demonstrates: run-time state in predicates, conditional operator chaining,
conditional predicate selection, typed and untyped text filters, and the
string filter expression.
"""

from decimal import Decimal

from dynquery import (
    all_of,
    at_least,
    between,
    configure_logging,
    equals,
    filter_by_text,
    filter_by_text_expression,
    filter_by_text_untyped,
    from_collection,
    load_settings,
)
from dynquery.samples import Employee, Task, employees, format_task, full_name, tasks

configure_logging(load_settings())

employee_source = from_collection(employees(), Employee)
task_source = from_collection(tasks(), Task)

# 1. Run-time state captured in the predicate
min_salary = Decimal(55000)
max_salary = Decimal(75000)

employee_query = employee_source.where(between("salary", min_salary, max_salary))
print("1. Using run-time state in a predicate:")
print(",".join(full_name(e) for e in employee_query))
# Output: Alice Williams,Bob Brown

# 2. Chaining operators conditionally
sort_by_rating = True
employee_query = employee_source
if sort_by_rating:
    employee_query = employee_query.order_by("performance_rating")

print("2. Chaining operators conditionally:")
print(",".join(full_name(e) for e in employee_query))
# Output: Bob Brown,Alice Williams,Charlie Taylor

# 3. Choosing the predicate from the criteria that are present
target_department = "IT"
target_rating = 4

predicate = all_of(
    equals("department", target_department),
    at_least("performance_rating", target_rating),
)
employee_query = employee_source.where(predicate)

print("3. Choosing the predicate at run time:")
print(",".join(full_name(e) for e in employee_query))
# Output: Alice Williams

# 4. Text filter over a known element type
print("4. Text filter built from the element type:")
print(",".join(full_name(e) for e in filter_by_text(employee_source, "Alice")))
# Output: Alice Williams

print(",".join(format_task(t) for t in filter_by_text(task_source, "Project abc")))
# Output: Task Detail:
#             Title: Project abc Status Report
#             Description: give a quick summary of how the project has gone before the time period

# 5. Text filter with the element type discovered from the data
print("5. Text filter attached to an untyped pipeline:")
print(",".join(full_name(e) for e in filter_by_text_untyped(employees(), "Charlie")))
# Output: Charlie Taylor

# 6. Text filter through a filter expression
print("6. Text filter through a filter expression:")
print(",".join(full_name(e) for e in filter_by_text_expression(employees(), "HR")))
# Output: Bob Brown
