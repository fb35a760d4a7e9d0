"""Base filter: configuration handling and match decorations."""

import uuid
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from ..errors import ConfigurationError, FieldReferenceError
from ..logging_config import get_logger
from ..models import TAGS, TIMESTAMP, Event, parse_field_ref
from ..tracker import IMatchTracker

logger = get_logger(__name__)


class FilterConfig(BaseModel):
    """Options shared by every filter."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    id: str | None = None
    add_field: dict[str, Any] = {}
    remove_field: list[str] = []
    add_tag: list[str] = []
    remove_tag: list[str] = []

    @field_validator("add_field")
    @classmethod
    def _check_add_field(cls, value: dict[str, Any]) -> dict[str, Any]:
        for ref in value:
            if "%{" in ref:
                continue
            if parse_field_ref(ref)[0] == TIMESTAMP:
                raise ValueError(f"{TIMESTAMP} cannot be set through add_field")
        return value

    @field_validator("remove_field")
    @classmethod
    def _check_remove_field(cls, value: list[str]) -> list[str]:
        for ref in value:
            if "%{" in ref:
                continue
            if parse_field_ref(ref)[0] == TIMESTAMP:
                raise ValueError(f"{TIMESTAMP} cannot be removed")
        return value


class BaseFilter(ABC):
    """
    A single event-processing step.

    Subclasses set ``config_name``/``config_class`` and implement ``process``.
    ``filter_matched`` must be called by ``process`` on every successful path.
    """

    config_name: ClassVar[str] = "base"
    config_class: ClassVar[type[FilterConfig]] = FilterConfig

    def __init__(
        self,
        config: Mapping[str, Any] | FilterConfig,
        tracker: IMatchTracker | None = None,
    ):
        self._config = self._validate(config)
        self._tracker = tracker
        self._id = self._config.id or f"{self.config_name}_{uuid.uuid4().hex[:8]}"
        self._registered = False

    @classmethod
    def _validate(cls, config: Mapping[str, Any] | FilterConfig) -> FilterConfig:
        if isinstance(config, cls.config_class):
            return config
        if isinstance(config, FilterConfig):
            config = config.model_dump(exclude_unset=True)
        try:
            return cls.config_class.model_validate(dict(config))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid {cls.config_name} filter configuration: {e}"
            ) from e

    @property
    def id(self) -> str:
        return self._id

    @property
    def config(self) -> FilterConfig:
        return self._config

    def register(self) -> None:
        """One-time setup before the first event. Safe to call more than once."""
        if self._registered:
            return
        self._registered = True
        logger.debug("Registered %s filter %s", self.config_name, self._id)

    @abstractmethod
    def process(self, event: Event) -> Event:
        """Process one event in place and return it."""
        ...

    def filter_events(self, events: Iterable[Event]) -> list[Event]:
        """Process each event in order."""
        return [self.process(event) for event in events]

    def filter_matched(self, event: Event) -> None:
        """Apply add_field/remove_field/add_tag/remove_tag, then notify the tracker."""
        for ref, value in self._config.add_field.items():
            resolved = event.sprintf(ref)
            try:
                self._add_field(event, resolved, self._interpolate(event, value))
            except (FieldReferenceError, TypeError) as e:
                logger.warning(
                    "Skipping add_field",
                    extra={"context": {"filter": self._id, "field": resolved, "error": str(e)}},
                )

        for ref in self._config.remove_field:
            resolved = event.sprintf(ref)
            try:
                event.remove(resolved)
            except (FieldReferenceError, ValueError) as e:
                logger.warning(
                    "Skipping remove_field",
                    extra={"context": {"filter": self._id, "field": resolved, "error": str(e)}},
                )

        for tag in self._config.add_tag:
            event.tag(event.sprintf(tag))

        if self._config.remove_tag:
            self._remove_tags(event, [event.sprintf(t) for t in self._config.remove_tag])

        self._track("matched")

    def _track(self, event_type: str) -> None:
        if self._tracker is not None:
            self._tracker.track(event_type, self._id)

    @staticmethod
    def _interpolate(event: Event, value: Any) -> Any:
        if isinstance(value, str):
            return event.sprintf(value)
        if isinstance(value, list):
            return [event.sprintf(v) if isinstance(v, str) else v for v in value]
        return value

    @staticmethod
    def _add_field(event: Event, ref: str, value: Any) -> None:
        # An existing value is turned into a list and the new value appended
        if not event.includes(ref):
            event.set(ref, value)
            return
        current = event.get(ref)
        if isinstance(current, list):
            current.append(value)
        else:
            event.set(ref, [current, value])

    @staticmethod
    def _remove_tags(event: Event, tags: list[str]) -> None:
        current = event.get(TAGS)
        if isinstance(current, list):
            event.set(TAGS, [t for t in current if t not in tags])
        elif isinstance(current, str) and current in tags:
            event.remove(TAGS)
