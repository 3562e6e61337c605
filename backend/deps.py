"""
Shared FastAPI dependencies.

The network config lives on `app.state` (set by the app factory), and each
request gets fresh, stateless gateway/builder/submitter objects around it.
Tests swap the ledger by overriding `get_ledger_gateway`.
"""

from __future__ import annotations

from fastapi import Depends, Request

from config import NetworkConfig
from services.transaction_service import TransactionBuilder, TransactionSubmitter
from stellar_client import HorizonGateway, LedgerGateway


def get_network(request: Request) -> NetworkConfig:
    return request.app.state.network


def get_ledger_gateway(network: NetworkConfig = Depends(get_network)) -> LedgerGateway:
    return HorizonGateway(network)


def get_transaction_builder(
    network: NetworkConfig = Depends(get_network),
    gateway: LedgerGateway = Depends(get_ledger_gateway),
) -> TransactionBuilder:
    return TransactionBuilder(network, gateway)


def get_transaction_submitter(
    network: NetworkConfig = Depends(get_network),
    gateway: LedgerGateway = Depends(get_ledger_gateway),
) -> TransactionSubmitter:
    return TransactionSubmitter(network, gateway)
