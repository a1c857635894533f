"""
Report contract and registry.

Concrete reports subclass Report and register themselves with the module-level
registry so the routes can look them up by name.
"""
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Optional, Sequence, Type

from app.core.i18n import Translator, get_translator
from app.features.permissions.dependencies import SecurityStore
from app.features.reports.columns import ColumnSet
from app.features.reports.listing import ReportList
from app.features.users.models import User


class Report(ABC):
    """
    A read-only tabular report over the account store.

    Instances are request-scoped: every call to source_records() re-reads current data.
    """

    name: ClassVar[str]

    def __init__(
        self,
        store: SecurityStore,
        site_url: Optional[str] = None,
        translator: Optional[Translator] = None,
    ):
        self.store = store
        self.site_url = site_url
        self.translator = translator or get_translator()

    @abstractmethod
    def title(self) -> str:
        ...

    def description(self) -> str:
        return ""

    @abstractmethod
    def columns(self) -> ColumnSet:
        ...

    def sort_columns(self) -> Sequence[str]:
        """Keys the grid may sort by; all columns unless overridden."""
        return self.columns().keys()

    @abstractmethod
    async def source_records(self) -> List:
        ...

    @abstractmethod
    async def can_view(self, actor: Optional[User]) -> bool:
        ...

    async def get_list(self) -> ReportList:
        """Generate the records and wrap them for source/view access."""
        records = await self.source_records()
        return ReportList(records, self.columns(), self.sort_columns())


class ReportRegistry:
    """Report classes by name."""

    def __init__(self) -> None:
        self._reports: Dict[str, Type[Report]] = {}

    def register(self, report_class: Type[Report]) -> Type[Report]:
        """Register a report class; usable as a class decorator."""
        if report_class.name in self._reports:
            raise ValueError(f"Report already registered: {report_class.name}")
        self._reports[report_class.name] = report_class
        return report_class

    def get(self, name: str) -> Type[Report]:
        """Raises KeyError for unknown names."""
        return self._reports[name]

    def names(self) -> List[str]:
        return list(self._reports)


registry = ReportRegistry()
