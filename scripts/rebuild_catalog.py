from bollard_findr.config import AppConfig
from bollard_findr.catalog import rebuild_catalog
from bollard_findr.logging_utils import configure_logging

if __name__ == "__main__":
    cfg = AppConfig.from_env()
    configure_logging(cfg.log_level)
    items = rebuild_catalog(cfg.image_dir, cfg.catalog_path)
    untagged = sum(1 for x in items if not any(x.tags.values()))
    print(f"Catalog rebuilt. Images: {len(items)} ({untagged} without tags)")
