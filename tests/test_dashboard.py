import pytest

from sophos_dashboard.dashboard import EndpointFilter, compute_stats, filter_endpoints, filter_options
from sophos_dashboard.mock_data import MOCK_ENDPOINTS


def test_stats_for_sample_data():
    stats = compute_stats(MOCK_ENDPOINTS)

    assert stats.total_endpoints == 10
    assert stats.online_endpoints == 8
    assert stats.offline_endpoints == 2
    assert stats.healthy_endpoints == 7
    assert stats.warning_endpoints == 2
    assert stats.critical_endpoints == 1
    assert stats.unknown_endpoints == 0
    assert stats.os_counts["Windows 11"] == 3
    assert stats.type_counts == {"computer": 6, "server": 3, "mobile": 1}
    assert stats.group_counts["Sales Team"] == 3


def test_stats_for_empty_list():
    stats = compute_stats([])

    assert stats.total_endpoints == 0
    assert stats.offline_endpoints == 0
    assert stats.to_dict()["osCounts"] == {}


def test_stats_online_offline_add_up():
    subset = MOCK_ENDPOINTS[:4]
    stats = compute_stats(subset)

    assert stats.total_endpoints == 4
    assert stats.online_endpoints == 3
    assert stats.offline_endpoints == 1


def test_search_is_case_insensitive_over_hostname_os_and_group():
    assert [ep.id for ep in filter_endpoints(MOCK_ENDPOINTS, EndpointFilter(search="macbook"))] == ["3"]
    assert [ep.id for ep in filter_endpoints(MOCK_ENDPOINTS, EndpointFilter(search="UBUNTU"))] == ["5"]
    assert [ep.id for ep in filter_endpoints(MOCK_ENDPOINTS, EndpointFilter(search="hr dep"))] == ["9"]


def test_combined_filters():
    f = EndpointFilter(status="offline", health="warning", group="Sales Team")
    assert [ep.id for ep in filter_endpoints(MOCK_ENDPOINTS, f)] == ["2", "7"]

    f = EndpointFilter(type="server", os="Windows Server 2022")
    assert [ep.id for ep in filter_endpoints(MOCK_ENDPOINTS, f)] == ["4"]


def test_default_filter_matches_everything():
    assert len(filter_endpoints(MOCK_ENDPOINTS, EndpointFilter())) == 10


def test_invalid_status_filter_rejected():
    with pytest.raises(ValueError):
        EndpointFilter(status="sleeping")


def test_filter_options():
    options = filter_options(MOCK_ENDPOINTS)

    assert options["type"] == ["computer", "mobile", "server"]
    assert "iOS" in options["os"]
    assert options["group"][0] == "Design Team"
