# tests/conftest.py
import logging
from datetime import datetime
from typing import List

import pytest
import pytest_asyncio
from pydantic import BaseModel, ConfigDict, Field

from query_request import MemoryRepository, Schema


# --- Logger Fixture ---


@pytest.fixture(scope="session")
def logger():
    """Create a test logger."""
    _logger = logging.getLogger("test_search_logger")
    if not _logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        handler.setLevel(logging.DEBUG)
        _logger.addHandler(handler)
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False
    return logging.LoggerAdapter(_logger, {})


# --- Test Entity ---


class OperatingSystem(BaseModel):
    """Operating system row; ``releaseDate`` is the key clients use."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    version: str
    kernel: str
    release_date: datetime = Field(alias="releaseDate")
    usages: int


def _os(id, name, version, kernel, release_date, usages) -> OperatingSystem:
    return OperatingSystem(
        id=id,
        name=name,
        version=version,
        kernel=kernel,
        release_date=datetime.strptime(release_date, "%d-%m-%Y %H:%M:%S"),
        usages=usages,
    )


# Insertion order is deliberately not release order.
OPERATING_SYSTEMS: List[OperatingSystem] = [
    _os(1, "Arch Linux", "2022.03.01", "5.16", "01-03-2022 00:10:00", 76),
    _os(2, "Ubuntu", "20.04", "5.8", "23-04-2020 10:00:00", 1000),
    _os(3, "Ubuntu", "21.10", "5.13", "14-10-2021 10:00:00", 250),
    _os(4, "CentOS", "8", "4.18", "24-09-2019 08:00:00", 120),
    _os(5, "CentOS", "7", "3.10", "07-07-2014 08:00:00", 150),
    _os(6, "Debian", "11", "5.10", "14-08-2021 12:00:00", 300),
    _os(7, "Fedora", "35", "5.14", "02-11-2021 09:30:00", 180),
    _os(8, "Linux Mint", "20.3", "5.13", "07-01-2022 11:00:00", 90),
    _os(9, "Pop!_OS", "21.10", "5.13", "14-12-2021 15:45:00", 100),
    _os(10, "openSUSE Leap", "15.3", "5.3", "02-06-2021 07:00:00", 60),
]


@pytest.fixture
def operating_system_type():
    return OperatingSystem


@pytest.fixture
def operating_systems() -> List[OperatingSystem]:
    return list(OPERATING_SYSTEMS)


@pytest.fixture
def operating_system_schema() -> Schema:
    return Schema.from_model(OperatingSystem)


@pytest_asyncio.fixture
async def os_repository(operating_systems, logger):
    """A memory repository holding the ten operating systems."""
    repo = MemoryRepository(OperatingSystem)
    await repo.store_many(operating_systems, logger)
    return repo
