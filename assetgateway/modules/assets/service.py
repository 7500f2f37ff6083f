import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Sequence, Tuple

from assetgateway.modules.api import AssetCreateRequest, AssetUpdateRequest
from assetgateway.modules.gateway import (
    ResponseParseError,
    SessionManager,
    TransactionError,
)

logger = logging.getLogger(__name__)

# Chaincode functions
CREATE_ASSET = "CreateAsset"
READ_ASSET = "ReadAsset"
UPDATE_ASSET = "UpdateAsset"
GET_ALL_ASSETS = "GetAllAssets"
GET_ASSET_HISTORY = "GetAssetHistory"


def to_decimal_string(name: str, value: Any) -> str:
    """
    Render a numeric value the way the chaincode expects it.

    Integral values lose any fractional zeros (``100.0`` -> ``"100"``);
    other values keep their decimal digits.

    Raises:
        TransactionError: If value is missing or not numeric
    """
    if value is None:
        raise TransactionError(f"Missing transaction argument: {name}")
    if isinstance(value, bool):
        raise TransactionError(f"Transaction argument {name} must be numeric, got {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise TransactionError(
            f"Transaction argument {name} must be numeric, got {value!r}"
        ) from None
    if not number.is_finite():
        raise TransactionError(f"Transaction argument {name} must be finite, got {value!r}")
    if number == number.to_integral_value():
        return str(int(number))
    return format(number, "f")


def _require(args: Sequence[Tuple[str, Any]]) -> List[str]:
    values = []
    for name, value in args:
        if value is None:
            raise TransactionError(f"Missing transaction argument: {name}")
        if isinstance(value, bool):
            value = "true" if value else "false"
        values.append(str(value))
    return values


def _parse(payload: bytes, what: str) -> Any:
    try:
        return json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ResponseParseError(f"Ledger returned malformed {what}: {e}") from e


def normalize_asset_list(payload: bytes) -> List[Any]:
    """
    Turn a GetAllAssets payload into a list.

    The ledger answers an empty world state with an empty payload or
    ``null``; those, unparseable payloads and non-list values all become
    an empty list.
    """
    text = payload.decode("utf-8", errors="replace").strip()
    if not text:
        return []
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("GetAllAssets returned a malformed payload, treating it as empty")
        return []
    if not isinstance(parsed, list):
        if parsed is not None:
            logger.warning("GetAllAssets returned a non-list payload, treating it as empty")
        return []
    return parsed


class AssetService:
    """Asset transactions on top of the shared ledger session."""

    def __init__(self, session_manager: SessionManager):
        self.session_manager = session_manager

    async def create_asset(self, request: AssetCreateRequest) -> Dict[str, str]:
        args = _require([
            ("assetID", request.asset_id),
            ("dealerID", request.dealer_id),
            ("msisdn", request.msisdn),
            ("mpin", request.mpin),
            ("balance", to_decimal_string("balance", request.balance)),
            ("status", request.status),
            ("transAmount", to_decimal_string("transAmount", request.trans_amount)),
            ("transType", request.trans_type),
            ("remarks", request.remarks),
        ])
        handle = await self.session_manager.get_handle()
        await handle.submit(CREATE_ASSET, *args)
        return {"message": "Asset created successfully", "assetID": args[0]}

    async def read_asset(self, asset_id: str) -> Any:
        handle = await self.session_manager.get_handle()
        result = await handle.evaluate(READ_ASSET, asset_id)
        return _parse(result, f"asset {asset_id}")

    async def update_asset(self, asset_id: str, request: AssetUpdateRequest) -> Dict[str, str]:
        args = _require([
            ("balance", to_decimal_string("balance", request.balance)),
            ("status", request.status),
            ("transType", request.trans_type),
            ("remarks", request.remarks),
            ("transAmount", to_decimal_string("transAmount", request.trans_amount)),
        ])
        handle = await self.session_manager.get_handle()
        await handle.submit(UPDATE_ASSET, asset_id, *args)
        return {"message": "Asset updated successfully", "assetID": asset_id}

    async def list_assets(self) -> List[Any]:
        handle = await self.session_manager.get_handle()
        result = await handle.evaluate(GET_ALL_ASSETS)
        return normalize_asset_list(result)

    async def asset_history(self, asset_id: str) -> Any:
        handle = await self.session_manager.get_handle()
        result = await handle.evaluate(GET_ASSET_HISTORY, asset_id)
        return _parse(result, f"history for asset {asset_id}")
