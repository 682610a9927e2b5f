# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Seed data initialization module.

Scans a directory for YAML fixture files and loads them through the data
loader when the database has no forms yet.
"""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from cms_forms.core.config import settings
from cms_forms.models.form import Form
from cms_forms.services.data_loader import DataLoader

logger = logging.getLogger(__name__)


def run_fixture_initialization(
    db: Session,
    data_dir: Optional[str] = None,
    force: Optional[bool] = None,
) -> int:
    """
    Load every *.yaml file of the seed directory, in file name order.

    Args:
        db: Database session
        data_dir: Directory to scan, defaults to settings.INIT_DATA_DIR
        force: Load even if forms already exist, defaults to settings.INIT_DATA_FORCE

    Returns:
        Number of records created
    """
    if not settings.INIT_DATA_ENABLED:
        logger.info("Seed data initialization is disabled")
        return 0

    force = settings.INIT_DATA_FORCE if force is None else force
    if not force and db.query(Form).first() is not None:
        logger.info("Forms already exist, skipping seed data initialization")
        return 0

    init_dir = Path(data_dir or settings.INIT_DATA_DIR)
    if not init_dir.is_dir():
        logger.warning(f"Seed data directory not found: {init_dir}")
        return 0

    loader = DataLoader(db)
    created = 0
    for yaml_file in sorted(init_dir.glob("*.yaml")):
        try:
            created += len(loader.load_yaml(yaml_file))
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to load seed file {yaml_file}: {e}")
    logger.info(f"Seed data initialization created {created} records")
    return created
