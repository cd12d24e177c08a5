"""Sample records used by the examples and tests."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Employee(BaseModel):
    model_config = ConfigDict(frozen=True)

    firstname: str
    lastname: str
    salary: Decimal
    department: str
    performance_rating: Optional[int] = None


class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str


def employees() -> list[Employee]:
    return [
        Employee(firstname="Alice", lastname="Williams", salary=Decimal(60000), department="IT", performance_rating=4),
        Employee(firstname="Bob", lastname="Brown", salary=Decimal(75000), department="HR", performance_rating=3),
        Employee(firstname="Charlie", lastname="Taylor", salary=Decimal(50000), department="Finance", performance_rating=5),
    ]


def tasks() -> list[Task]:
    return [
        Task(
            title="Weekly Team Update",
            description="Add updates from the previous week worth mentioning to the team and/or company all hands",
        ),
        Task(
            title="Project abc Status Report",
            description="give a quick summary of how the project has gone before the time period",
        ),
    ]


def full_name(employee: Employee) -> str:
    return f"{employee.firstname} {employee.lastname}"


def format_task(task: Task) -> str:
    return f"Task Detail:\n\tTitle: {task.title}\n\tDescription: {task.description}\n"
