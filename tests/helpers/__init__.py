from .fakes import FakeCache, FakeClock, FakeLookup, FakeTransport

__all__ = ["FakeCache", "FakeClock", "FakeLookup", "FakeTransport"]
