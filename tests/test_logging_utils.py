import json
import logging

from pocket_perceptron.config import LoggingConfig
from pocket_perceptron.logging_utils import JsonFormatter, configure_logging


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord("pocket", logging.INFO, __file__, 1, "checkpoint_saved", (), None)
    record.path = "state.log"
    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "checkpoint_saved"
    assert payload["level"] == "INFO"
    assert payload["path"] == "state.log"


def test_configure_logging_writes_to_file(tmp_path) -> None:
    log_file = tmp_path / "pocket.log"
    configure_logging(LoggingConfig(level="DEBUG", log_file=str(log_file)))
    logging.getLogger("pocket_perceptron.test").info("hello", extra={"processed": 3})
    for handler in logging.getLogger().handlers:
        handler.flush()

    line = log_file.read_text().splitlines()[-1]
    assert json.loads(line)["processed"] == 3
    for handler in logging.getLogger().handlers[:]:
        handler.close()
        logging.getLogger().removeHandler(handler)
