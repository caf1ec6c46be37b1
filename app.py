import os

from bollard_findr.config import AppConfig, DEFAULT_DIMENSIONS
from bollard_findr.logging_utils import configure_logging
from bollard_findr.ui import build_demo

app_cfg = AppConfig.from_env()
configure_logging(app_cfg.log_level)

# Ensure folders exist
if not app_cfg.asset_prefix:
    os.makedirs(app_cfg.image_dir, exist_ok=True)

demo = build_demo(app_cfg, DEFAULT_DIMENSIONS)

if __name__ == "__main__":
    demo.launch(allowed_paths=[app_cfg.image_dir])
