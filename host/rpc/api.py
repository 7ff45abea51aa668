# MIT License
# Copyright (c) 2025 Hashborn

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from protocol.types.common import BroadcastError, ConversionOverflowError, ValidationError
from protocol.units import (
    bandwidth_price_to_human,
    hastings_to_coins,
    storage_price_to_human,
)
from ..core.host import HostService
from ..core.settings import merge_settings

logger = logging.getLogger(__name__)

app = FastAPI(title="Storage Host RPC")

host: Optional[HostService] = None

class AnnounceRequest(BaseModel):
    netaddress: Optional[str] = None

def _require_host() -> HostService:
    if not host:
        raise HTTPException(status_code=503, detail="Host not initialized")
    return host

@app.get("/")
async def root():
    return {"message": "Storage Host RPC", "version": "1.0"}

@app.get("/host")
async def get_host():
    """Financial metrics, internal settings and network metrics of the host."""
    h = _require_host()
    return {
        "financialmetrics": h.financial_metrics().model_dump(mode="json", by_alias=True),
        "internalsettings": h.internal_settings().model_dump(mode="json", by_alias=True),
        "networkmetrics": h.network_metrics().model_dump(mode="json", by_alias=True),
    }

@app.post("/host")
async def update_host_settings(update: Dict[str, Any] = Body(...)):
    """
    Update internal settings. Keys not present in the body keep their
    current value; the merged settings are applied all at once.
    """
    h = _require_host()
    try:
        settings = merge_settings(h.internal_settings(), update)
        h.set_internal_settings(settings)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"status": "ok", "internalsettings": settings.model_dump(mode="json", by_alias=True)}

@app.post("/host/announce")
async def announce_host(req: Optional[AnnounceRequest] = Body(default=None)):
    h = _require_host()
    try:
        if req and req.netaddress:
            h.announce_address(req.netaddress)
        else:
            h.announce()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except BroadcastError as e:
        logger.error(f"Announcement failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return {"status": "announced", "netaddress": h.network_metrics().net_address}

@app.get("/host/conversions")
async def get_human_prices():
    """Current price settings in human units (coins, coins/TB, coins/TB/month)."""
    settings = _require_host().internal_settings()
    try:
        return {
            "contractprice": hastings_to_coins(settings.minimum_contract_price),
            "collateral": storage_price_to_human(settings.collateral),
            "storageprice": storage_price_to_human(settings.minimum_storage_price),
            "minimumdownloadbandwidthprice": bandwidth_price_to_human(settings.minimum_download_bandwidth_price),
            "minimumuploadbandwidthprice": bandwidth_price_to_human(settings.minimum_upload_bandwidth_price),
        }
    except ConversionOverflowError as e:
        raise HTTPException(status_code=422, detail=str(e))

@app.get("/metrics")
async def get_metrics():
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
    from ..observability.metrics import metrics_registry, update_metrics

    update_metrics(_require_host())
    return Response(content=generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)

def start_rpc_server(host_instance: HostService, bind_host: str = "0.0.0.0", port: int = 8080):
    global host
    host = host_instance
    import uvicorn
    uvicorn.run(app, host=bind_host, port=port)
