from src.hr_portal.hr_portal.employees.reporting import ReportingLines

from tests.fakes import InMemoryEmployees, make_employee, viewer

SENIOR = make_employee(1, level=2)
MANAGER = make_employee(2, level=1, manager_id=1)
PEER_MANAGER = make_employee(3, level=1, manager_id=1)
DEV = make_employee(4, level=0, manager_id=2)
LEFT = make_employee(5, level=0, manager_id=2, is_active=False)
PEER_DEV = make_employee(6, level=0, manager_id=3)
ADMIN = make_employee(7, level=3)


def _lines(*extra):
    return ReportingLines(InMemoryEmployees([SENIOR, MANAGER, PEER_MANAGER, DEV, LEFT, PEER_DEV, ADMIN, *extra]))


def test_team_ids_by_level():
    lines = _lines()
    assert lines.team_ids(viewer(DEV)) == {4}
    assert lines.team_ids(viewer(MANAGER)) == {2, 4}
    assert lines.team_ids(viewer(SENIOR)) == {1, 2, 3, 4, 6}
    assert lines.team_ids(viewer(ADMIN)) is None


def test_directory_includes_peers_and_inactive_reports():
    lines = _lines()
    assert lines.directory_ids(viewer(MANAGER)) == {2, 3, 4, 5}
    assert lines.directory_ids(viewer(DEV)) == {4, 5}


def test_reporting_chain():
    lines = _lines()
    assert lines.is_in_reporting_chain(1, 4)
    assert not lines.is_in_reporting_chain(3, 4)
    assert lines.reports_directly_to(2, 4)
    assert not lines.reports_directly_to(1, 4)


def test_reporting_chain_survives_cycle():
    a = make_employee(20, level=1, manager_id=21)
    b = make_employee(21, level=1, manager_id=20)
    lines = _lines(a, b)
    assert not lines.is_in_reporting_chain(99, 20)
