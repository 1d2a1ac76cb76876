import os

from techservice import performance_logger


def test_slow_function_is_logged(tmp_path, monkeypatch):
    monkeypatch.setattr(performance_logger, 'ENABLE_PROFILING', True)
    monkeypatch.setattr(performance_logger, 'THRESHOLD_WARNING', 0)
    monkeypatch.setattr(performance_logger, 'LOGS_DIR', performance_logger.LOGS_DIR)
    performance_logger.set_logs_dir(str(tmp_path / 'logs'))

    @performance_logger.profile_function(name='Contar OS')
    def count(items):
        return len(items)

    assert count([1, 2, 3]) == 3

    log_path = tmp_path / 'logs' / performance_logger.SLOW_FUNCTIONS_LOG
    assert os.path.exists(log_path)
    assert 'Função: Contar OS' in log_path.read_text(encoding='utf-8')


def test_disabled_profiling_returns_original_function(monkeypatch):
    monkeypatch.setattr(performance_logger, 'ENABLE_PROFILING', False)

    def count(items):
        return len(items)

    assert performance_logger.profile_function(count) is count
