"""
Assets Module - Black Box Interface

Purpose: Translate asset operations into chaincode transactions
Interface: AssetService.create_asset(), read_asset(), update_asset(),
           list_assets(), asset_history()
Hidden: Argument marshalling, ledger payload parsing

Depends only on the gateway module's SessionManager.
"""

from .service import AssetService, normalize_asset_list, to_decimal_string

__all__ = ["AssetService", "normalize_asset_list", "to_decimal_string"]
