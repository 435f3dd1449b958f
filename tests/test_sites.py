# tests/test_sites.py
from export.sites import select_sites
from tests.conftest import FakeHost


def test_select_sites_filters_personal_and_special_sites():
    host = FakeHost()
    for sid in ("MATH2", "~jdoe", "!gateway", "MATH1"):
        host.add_site("FA24", sid)

    sites = select_sites("FA24", host)

    assert [s.id for s in sites] == ["MATH1", "MATH2"]
    assert ("find_sites", "FA24") in host.calls


def test_select_sites_unknown_term():
    assert select_sites("NOPE", FakeHost()) == []


def test_select_sites_keeps_directory_order():
    class Directory:
        def find_sites(self, term):
            from models import CourseSite
            return [CourseSite("B", "b"), CourseSite("A", "a")]

        def is_personal_or_system_site(self, site_id):
            return False

    assert [s.id for s in select_sites("T", Directory())] == ["B", "A"]
