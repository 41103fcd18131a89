"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeRegistryStorePort: In-memory runner and streamer rows
- FakeSpeedrunDataPort: Canned personal-bests and names
- FakeStreamPlatformPort: Controllable live/offline status
- FakeNotificationPort: Captured announcements for assertion
- FakeSweepPort: Scripted sweep results for scheduler tests
- FakeManagementPort: Recorded registrations for command tests
"""

from .management import FakeManagementPort
from .notification import FakeNotificationPort
from .speedrun import FakeSpeedrunDataPort
from .store import FakeRegistryStorePort
from .streams import FakeStreamPlatformPort
from .sweep import FakeSweepPort

__all__ = [
    "FakeManagementPort",
    "FakeNotificationPort",
    "FakeRegistryStorePort",
    "FakeSpeedrunDataPort",
    "FakeStreamPlatformPort",
    "FakeSweepPort",
]
