# ==============================================================================
# SERVIÇO DE RELATÓRIOS - Faturamento por período e ranking de clientes
# ==============================================================================
# Agrega as OS de um período em contagens por status e valores financeiros.
#
# REGRAS:
# - CANCELED nunca entra em valor (faturamento, recebido, pendente, ranking)
#   mas continua contando nas quantidades
# - revenue_total == received + pending_value para qualquer conjunto
# - Percentuais com denominador zero valem 0
# ==============================================================================

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from techservice.config import DELETED_CLIENT_NAME, RANKING_SIZE
from techservice.exceptions import ValidationError
from techservice.models.entities import Client, ServiceOrder, ServiceStatus
from techservice.models.state import AppState, client_index, resolve_client
from techservice.performance_logger import profile_function


class Period(str, Enum):
    """Períodos do filtro de relatórios."""
    TODAY = 'TODAY'
    LAST_7_DAYS = 'LAST_7_DAYS'
    LAST_30_DAYS = 'LAST_30_DAYS'
    CUSTOM_RANGE = 'CUSTOM_RANGE'


# Nomes curtos aceitos na query string (?period=week)
_PERIOD_ALIASES = {
    'today': Period.TODAY,
    'week': Period.LAST_7_DAYS,
    'month': Period.LAST_30_DAYS,
    'custom': Period.CUSTOM_RANGE,
}

DEFAULT_PERIOD = Period.LAST_30_DAYS

DateLike = Union[date, datetime, str, None]


def parse_period(raw: Any) -> Period:
    """
    Converte texto em Period (aceita 'today', 'week', 'month', 'custom').

    Raises:
        ValidationError: Período desconhecido
    """
    if not raw:
        return DEFAULT_PERIOD
    if isinstance(raw, Period):
        return raw
    text = str(raw).strip()
    if text.lower() in _PERIOD_ALIASES:
        return _PERIOD_ALIASES[text.lower()]
    try:
        return Period(text.upper())
    except ValueError:
        raise ValidationError('Período inválido.')


def _to_day(value: DateLike) -> Optional[date]:
    """'YYYY-MM-DD', date ou datetime → date. Vazio → None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError('Data inválida (use AAAA-MM-DD).')


@dataclass
class Window:
    """
    Intervalo de datas de um período.

    Períodos móveis são fechados [start, end]; o período personalizado é
    semiaberto [start, end) para incluir o dia final inteiro.
    """
    start: datetime
    end: datetime
    end_inclusive: bool = True

    def contains(self, moment: Optional[datetime]) -> bool:
        if moment is None:
            return False
        if moment < self.start:
            return False
        if self.end_inclusive:
            return moment <= self.end
        return moment < self.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'endInclusive': self.end_inclusive,
        }


def get_window(
    period: Any,
    start: DateLike = None,
    end: DateLike = None,
    now: Optional[datetime] = None,
) -> Optional[Window]:
    """
    Calcula a janela do período.

    Args:
        period: Period ou alias
        start: Início do período personalizado (AAAA-MM-DD)
        end: Fim do período personalizado (AAAA-MM-DD, dia incluído)
        now: Instante de referência (padrão: agora, no fuso local)

    Returns:
        Window, ou None quando o período personalizado não tem as duas datas
        (nesse caso nenhuma OS é filtrada)
    """
    period = parse_period(period)
    now = now or datetime.now().astimezone()
    if now.tzinfo is None:
        now = now.astimezone()

    if period == Period.TODAY:
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return Window(today_start, now)

    if period == Period.LAST_7_DAYS:
        return Window(now - timedelta(days=7), now)

    if period == Period.LAST_30_DAYS:
        return Window(now - timedelta(days=30), now)

    start_day = _to_day(start)
    end_day = _to_day(end)
    if start_day is None or end_day is None:
        return None
    return Window(
        datetime.combine(start_day, time(0), tzinfo=timezone.utc),
        datetime.combine(end_day, time(0), tzinfo=timezone.utc) + timedelta(days=1),
        end_inclusive=False,
    )


def filter_by_period(
    orders: List[ServiceOrder],
    period: Any = DEFAULT_PERIOD,
    start: DateLike = None,
    end: DateLike = None,
    now: Optional[datetime] = None,
) -> List[ServiceOrder]:
    """OS cuja data cai na janela do período (ordem preservada)."""
    window = get_window(period, start, end, now)
    if window is None:
        return list(orders)
    return [order for order in orders if window.contains(order.parsed_date)]


def percentage(part: float, whole: float) -> float:
    """Percentual de part sobre whole; 0 quando whole é zero."""
    if not whole:
        return 0.0
    return part / whole * 100.0


# ==============================================================================
# RESUMO
# ==============================================================================

@dataclass
class ReportSummary:
    """Contagens e valores de um conjunto de OS."""
    counts: Dict[ServiceStatus, int] = field(
        default_factory=lambda: {status: 0 for status in ServiceStatus}
    )
    total: int = 0
    revenue_total: float = 0.0
    received: float = 0.0
    pending_value: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'counts': {status.value: count for status, count in self.counts.items()},
            'total': self.total,
            'revenueTotal': self.revenue_total,
            'received': self.received,
            'pendingValue': self.pending_value,
        }


def summarize(orders: List[ServiceOrder]) -> ReportSummary:
    """
    Agrega um conjunto de OS.

    - revenue_total: soma das OS não canceladas
    - received: soma das OS COMPLETED
    - pending_value: soma das OS nem canceladas nem concluídas
    """
    summary = ReportSummary()
    for order in orders:
        summary.counts[order.status] += 1
        summary.total += 1
        if order.is_canceled:
            continue
        summary.revenue_total += order.value
        if order.is_completed:
            summary.received += order.value
        else:
            summary.pending_value += order.value
    return summary


# ==============================================================================
# RANKING DE CLIENTES
# ==============================================================================

@dataclass
class RankingEntry:
    client_id: str
    name: str
    count: int = 0
    total_value: float = 0.0
    deleted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'clientId': self.client_id,
            'name': self.name,
            'count': self.count,
            'totalValue': self.total_value,
            'deleted': self.deleted,
        }


def rank_clients(
    orders: List[ServiceOrder],
    clients: List[Client],
    limit: int = RANKING_SIZE,
) -> List[RankingEntry]:
    """
    Top clientes por valor acumulado.

    OS de cliente removido caem num grupo "Cliente Excluído" por id órfão.
    CANCELED soma na contagem mas não no valor. Empates mantêm a ordem
    em que o cliente apareceu pela primeira vez.
    """
    clients_by_id = client_index(clients)
    groups: 'OrderedDict[str, RankingEntry]' = OrderedDict()

    for order in orders:
        entry = groups.get(order.client_id)
        if entry is None:
            client = resolve_client(order, clients_by_id)
            entry = RankingEntry(
                client_id=order.client_id,
                name=client.name if client else DELETED_CLIENT_NAME,
                deleted=client is None,
            )
            groups[order.client_id] = entry
        entry.count += 1
        if not order.is_canceled:
            entry.total_value += order.value

    ranked = sorted(groups.values(), key=lambda e: e.total_value, reverse=True)
    return ranked[:limit]


def finance_summary(orders: List[ServiceOrder]) -> Dict[str, float]:
    """
    Cartões da tela financeira (todas as OS, sem período).

    Returns:
        dict com to_receive (abertas), received (concluídas) e total
        (soma de todas as OS)
    """
    to_receive = 0.0
    received = 0.0
    total = 0.0
    for order in orders:
        total += order.value
        if order.is_completed:
            received += order.value
        elif not order.is_canceled:
            to_receive += order.value
    return {'to_receive': to_receive, 'received': received, 'total': total}


@profile_function(name='Montar relatório')
def build_report(
    orders: List[ServiceOrder],
    clients: List[Client],
    period: Any = DEFAULT_PERIOD,
    start: DateLike = None,
    end: DateLike = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Relatório completo de um período.

    Returns:
        dict com period, window, summary, statusPercentages,
        receivedPercentage, pendingPercentage e ranking
    """
    period = parse_period(period)
    now = now or datetime.now().astimezone()
    window = get_window(period, start, end, now)
    filtered = filter_by_period(orders, period, start, end, now)

    summary = summarize(filtered)
    return {
        'period': period.value,
        'window': window.to_dict() if window else None,
        'summary': summary.to_dict(),
        'statusPercentages': {
            status.value: percentage(count, summary.total)
            for status, count in summary.counts.items()
        },
        'receivedPercentage': percentage(summary.received, summary.revenue_total),
        'pendingPercentage': percentage(summary.pending_value, summary.revenue_total),
        'ranking': [entry.to_dict() for entry in rank_clients(filtered, clients)],
    }


class ReportService:
    """
    Relatórios sobre o estado da sessão.

    As funções do módulo são puras; o serviço só fornece as coleções atuais.
    """

    def __init__(self, state: AppState):
        self.state = state

    def build_report(self, period: Any = DEFAULT_PERIOD, start: DateLike = None,
                     end: DateLike = None, now: Optional[datetime] = None) -> Dict[str, Any]:
        return build_report(self.state.service_orders, self.state.clients,
                            period, start, end, now)

    def finance_summary(self) -> Dict[str, float]:
        return finance_summary(self.state.service_orders)
