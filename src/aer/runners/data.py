# Copyright 2026. Runner data: the JSON mapping handed to and read back from scripts.

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlparse

RunnerData = dict[str, Any]


@runtime_checkable
class RunnerCombiner(Protocol):
    def to_runner_data(self) -> RunnerData: ...

    def from_runner_data(self, data: RunnerData) -> None: ...


def validate_url(url: str) -> str:
    parsed = urlparse(url)
    if not parsed.scheme or (not parsed.netloc and parsed.scheme != "file"):
        raise ValueError(f"Invalid URL: {url!r}, expected an absolute URL")
    return url


@dataclass
class License:
    expression: str = ""
    url: str = ""

    def __post_init__(self):
        if self.url:
            validate_url(self.url)

    def is_empty(self) -> bool:
        return not self.expression and not self.url


@dataclass
class PackageMetadata:
    """Package metadata a script may update.

    Scripts can change the summary, project url and license. The id is
    fixed by the caller and never taken from script output.
    """
    id: str
    project_url: str = ""
    summary: str = ""
    license: License = field(default_factory=License)

    def __post_init__(self):
        if self.project_url:
            validate_url(self.project_url)

    def to_runner_data(self) -> RunnerData:
        data: RunnerData = {"id": self.id, "url": self.project_url, "summary": self.summary}
        license_data: RunnerData = {}
        if self.license.url:
            license_data["url"] = self.license.url
        if self.license.expression:
            license_data["expr"] = self.license.expression
        data["license"] = license_data
        return data

    def from_runner_data(self, data: RunnerData) -> None:
        # Validate everything first so a bad value leaves the metadata untouched.
        project_url, summary, license = self.project_url, self.summary, self.license
        for key, value in data.items():
            key = key.strip()
            if isinstance(value, dict):
                if key == "license":
                    license = license_from_runner_data(value)
                continue
            if not isinstance(value, str):
                continue
            if key in ("project_url", "url"):
                if value and value != project_url:
                    project_url = validate_url(value)
            elif key == "summary":
                summary = value
        self.project_url, self.summary, self.license = project_url, summary, license


def license_from_runner_data(values: RunnerData) -> License:
    expression = ""
    url = ""
    for key, value in values.items():
        if not isinstance(value, str):
            continue
        key = key.strip()
        if key == "url":
            url = value
        elif key == "expr":
            expression = value
    return License(expression=expression, url=url)


def to_runner_data(obj) -> RunnerData:
    if isinstance(obj, dict):
        return obj
    if isinstance(obj, RunnerCombiner):
        return obj.to_runner_data()
    raise TypeError(
        f"Cannot build runner data from {type(obj).__name__}: "
        "expected a dict or an object with to_runner_data()/from_runner_data()"
    )


def merge_runner_data(obj, data: RunnerData) -> None:
    """Write script output back into the caller's object."""
    if isinstance(obj, dict):
        obj.clear()
        obj.update(data)
    else:
        obj.from_runner_data(data)
