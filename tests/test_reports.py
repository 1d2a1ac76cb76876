from datetime import datetime, timedelta, timezone

import pytest

from techservice.config import DELETED_CLIENT_NAME
from techservice.exceptions import ValidationError
from techservice.models.entities import Client, ServiceOrder, ServiceStatus
from techservice.services.report_service import (
    Period,
    build_report,
    filter_by_period,
    finance_summary,
    get_window,
    parse_period,
    percentage,
    rank_clients,
    summarize,
)

NOW = datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc)


def order(oid, client_id, value, status=ServiceStatus.PENDING, date='2024-03-10T12:00:00Z'):
    return ServiceOrder(id=oid, client_id=client_id, equipment='Eq', problem='P',
                        status=status, value=value, date=date)


def test_seed_totals(state):
    summary = summarize(state.service_orders)
    assert summary.total == 3
    assert summary.revenue_total == pytest.approx(650.0)
    assert summary.received == pytest.approx(80.0)
    assert summary.pending_value == pytest.approx(570.0)


def test_revenue_invariant_ignores_canceled():
    orders = [
        order('a', '1', 0.1),
        order('b', '1', 0.2, ServiceStatus.COMPLETED),
        order('c', '2', 999.99, ServiceStatus.CANCELED),
        order('d', '2', 33.33, ServiceStatus.IN_PROGRESS),
    ]
    summary = summarize(orders)
    assert summary.counts[ServiceStatus.CANCELED] == 1
    assert summary.total == 4
    assert abs(summary.revenue_total - (summary.received + summary.pending_value)) < 1e-6
    assert summary.revenue_total == pytest.approx(33.63)


def test_empty_set_has_zero_percentages():
    report = build_report([], [], Period.LAST_7_DAYS, now=NOW)
    assert report['summary']['total'] == 0
    assert all(p == 0.0 for p in report['statusPercentages'].values())
    assert report['receivedPercentage'] == 0.0
    assert report['pendingPercentage'] == 0.0
    assert report['ranking'] == []


def test_percentage_zero_denominator():
    assert percentage(10, 0) == 0.0
    assert percentage(1, 4) == 25.0


def test_ranking_properties():
    clients = [Client(id=str(i), name=f'C{i}') for i in range(1, 8)]
    orders = [order(f'o{i}', str(i), float(i * 10)) for i in range(1, 8)]
    orders.append(order('x', '7', 500.0, ServiceStatus.CANCELED))

    ranking = rank_clients(orders, clients)

    assert len(ranking) == 5
    values = [e.total_value for e in ranking]
    assert values == sorted(values, reverse=True)
    assert ranking[0].client_id == '7'
    assert ranking[0].count == 2
    assert ranking[0].total_value == 70.0


def test_ranking_ties_keep_first_seen_order():
    clients = [Client(id='a', name='A'), Client(id='b', name='B')]
    orders = [order('1', 'b', 50.0), order('2', 'a', 50.0)]
    assert [e.client_id for e in rank_clients(orders, clients)] == ['b', 'a']


def test_ranking_groups_orphans_by_id():
    clients = [Client(id='1', name='Ana')]
    orders = [order('1', 'gone', 10.0), order('2', 'gone', 15.0), order('3', '1', 5.0)]
    ranking = rank_clients(orders, clients)
    assert ranking[0].name == DELETED_CLIENT_NAME
    assert ranking[0].deleted
    assert ranking[0].count == 2
    assert ranking[0].total_value == 25.0


def test_today_window():
    orders = [
        order('in', '1', 1.0, date='2024-03-10T01:00:00Z'),
        order('out', '1', 1.0, date='2024-03-09T23:00:00Z'),
    ]
    assert [o.id for o in filter_by_period(orders, Period.TODAY, now=NOW)] == ['in']


def test_rolling_windows():
    orders = [
        order('d3', '1', 1.0, date=(NOW - timedelta(days=3)).isoformat()),
        order('d20', '1', 1.0, date=(NOW - timedelta(days=20)).isoformat()),
        order('d40', '1', 1.0, date=(NOW - timedelta(days=40)).isoformat()),
    ]
    assert [o.id for o in filter_by_period(orders, 'week', now=NOW)] == ['d3']
    assert [o.id for o in filter_by_period(orders, Period.LAST_30_DAYS, now=NOW)] == ['d3', 'd20']


def test_custom_range_includes_whole_end_day():
    orders = [
        order('start', '1', 1.0, date='2024-03-01T00:00:00Z'),
        order('end', '1', 1.0, date='2024-03-05T23:59:59Z'),
        order('after', '1', 1.0, date='2024-03-06T00:00:00Z'),
        order('before', '1', 1.0, date='2024-02-29T23:59:59Z'),
    ]
    result = filter_by_period(orders, Period.CUSTOM_RANGE, '2024-03-01', '2024-03-05', now=NOW)
    assert [o.id for o in result] == ['start', 'end']


def test_custom_range_missing_boundary_passes_everything():
    orders = [order('a', '1', 1.0, date='2001-01-01T00:00:00Z'), order('b', '1', 1.0, date='bad')]
    assert get_window(Period.CUSTOM_RANGE, None, '2024-03-05', now=NOW) is None
    assert filter_by_period(orders, 'custom', '2024-03-01', None, now=NOW) == orders


def test_invalid_period_and_date():
    with pytest.raises(ValidationError):
        parse_period('yearly')
    with pytest.raises(ValidationError):
        get_window('custom', '01/03/2024', '2024-03-05', now=NOW)
    assert parse_period(None) == Period.LAST_30_DAYS


def test_build_report_percentages(state):
    report = build_report(state.service_orders, state.clients, Period.LAST_7_DAYS)
    assert report['summary']['revenueTotal'] == pytest.approx(650.0)
    assert report['statusPercentages']['COMPLETED'] == pytest.approx(100 / 3)
    assert report['receivedPercentage'] == pytest.approx(80 / 650 * 100)
    assert [e['name'] for e in report['ranking']] == ['João Silva', 'Maria Oliveira', 'Tech Corp Ltda']


def test_finance_summary_counts_all_orders():
    orders = [
        order('a', '1', 100.0),
        order('b', '1', 50.0, ServiceStatus.COMPLETED),
        order('c', '1', 30.0, ServiceStatus.CANCELED),
    ]
    assert finance_summary(orders) == {'to_receive': 100.0, 'received': 50.0, 'total': 180.0}


def test_build_report_uses_period_filter():
    orders = [
        order('in', '1', 10.0, date='2024-03-02T10:00:00Z'),
        order('out', '1', 20.0, date='2024-03-08T10:00:00Z'),
        order('bad', '1', 40.0, date='bad'),
    ]
    report = build_report(orders, [], 'custom', '2024-03-01', '2024-03-05', now=NOW)
    expected = filter_by_period(orders, 'custom', '2024-03-01', '2024-03-05', now=NOW)
    assert report['summary']['total'] == len(expected) == 1
    assert report['window']['start'] == '2024-03-01T00:00:00+00:00'

    passthrough = build_report(orders, [], 'custom', None, None, now=NOW)
    assert passthrough['window'] is None
    assert passthrough['summary']['total'] == 3
