from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from trusted_conf import ConfigImporter
from trusted_conf.config import YamlConfigLoader
from trusted_conf.config.models import ConfigLoadRequest
from trusted_conf.logging import init_logging


def main() -> None:
    config = YamlConfigLoader().load(ConfigLoadRequest(yaml_path="examples/settings.yaml"))
    init_logging(config.logging)

    logger = logging.getLogger("smoke")
    logger.info("Settings loaded separator=%r escape_names=%s", config.importer.default_separator, config.importer.escape_names)

    with tempfile.TemporaryDirectory() as tmp:
        conf = Path(tmp) / "net.conf"
        conf.write_text("IFACE=eth0\nMTU=1500  # jumbo frames off\nMTU=9000 extra\n", encoding="utf-8")

        importer = ConfigImporter.from_settings(config.importer)
        result = importer.import_all_required(conf, ["IFACE", "MTU"], r"[a-z0-9]+", config.importer.default_separator)
        logger.info("Imported ok=%s result=%s", result.ok, result)


if __name__ == "__main__":
    main()
