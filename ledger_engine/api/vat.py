"""
VAT API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException

from ledger_engine.api.deps import get_engine_config
from ledger_engine.engine_config import EngineConfig
from ledger_engine.schemas.money import VatRate
from ledger_engine.schemas.vat import VatConversionRequest, VatConversionResponse
from ledger_engine.services.amount_converter import (
    gross_from_net,
    split_gross,
    vat_amount,
)

router = APIRouter(prefix="/vat", tags=["VAT"])


@router.get("/rates", response_model=list[VatRate])
def list_vat_rates(config: EngineConfig = Depends(get_engine_config)):
    return list(config.vat_rates)


@router.post("/convert", response_model=VatConversionResponse)
def convert_amount(
    request: VatConversionRequest,
    config: EngineConfig = Depends(get_engine_config),
):
    """
    Split a gross amount into net and VAT, or add VAT to a net amount.

    Unknown codes, codes that do not apply to the given direction,
    and negative amounts are 400s.
    """
    try:
        rate = config.vat_rate(request.vat_code, request.direction)
        if request.amount_includes_vat:
            gross = request.amount
            net, vat = split_gross(gross, rate)
        else:
            net = request.amount
            vat = vat_amount(net, rate)
            gross = gross_from_net(net, rate)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return VatConversionResponse(rate=rate, net=net, vat=vat, gross=gross)
