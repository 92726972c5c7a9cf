"""Key-protected maintenance routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from requestdesk.core.board_config import ConfigHolder
from requestdesk.core.dependencies import get_config_holder, get_label_provisioner, require_api_key
from requestdesk.core.exceptions import ConfigError
from requestdesk.services import LabelProvisioner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["admin"], dependencies=[Depends(require_api_key)])


@router.post("/labels/verify")
async def verify_labels(
    provisioner: LabelProvisioner = Depends(get_label_provisioner),
) -> dict:
    """Create any taxonomy labels missing from the configured boards."""
    report = await provisioner.verify_labels()
    return report.to_dict()


@router.post("/config/reload")
async def reload_config(holder: ConfigHolder = Depends(get_config_holder)) -> dict:
    """Re-read the board configuration file. The old one stays active on error."""
    try:
        config = holder.reload()
    except ConfigError as e:
        logger.error(f"Config reload failed: {e}")
        raise HTTPException(status_code=500, detail=str(e)) from None
    return {"boards": len(config.boards), "labels": len(config.labels)}
