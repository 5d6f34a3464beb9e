import logging
import logging.config
from typing import Optional

from habitgem.config import HabitGemConfig, config as default_config

def setup_logging(cfg: Optional[HabitGemConfig] = None) -> logging.Logger:
    cfg = cfg or default_config
    if cfg.log_to_file:
        cfg.log_dir.mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(cfg.get_logging_config())
    logger = logging.getLogger("habitgem")
    logger.debug("Logging configured: level=%s file=%s", cfg.log_level.value, cfg.log_to_file)
    return logger
