"""
Fixtures for tests that need a live cluster.

These tests are skipped unless RYOGOKU_E2E=1. They use the current
kubeconfig context, install the CRD if needed and run the operator in a
background thread, watching a throwaway namespace.
"""
import asyncio
import os
import threading
import time
import uuid

import kopf
import pytest
from kubernetes import client, config

from ryogoku.crds.const import CRD_NAME_DEVNET
from ryogoku.crds.schema import build_crd

E2E_ENABLED = os.getenv("RYOGOKU_E2E") == "1"
E2E_NAMESPACE = os.getenv("RYOGOKU_TEST_NAMESPACE", f"ryogoku-test-{uuid.uuid4().hex[:8]}")


def pytest_collection_modifyitems(config, items):
    if E2E_ENABLED:
        return
    skip = pytest.mark.skip(reason="set RYOGOKU_E2E=1 to run tests against a cluster")
    for item in items:
        if "e2e" in item.nodeid.split("/"):
            item.add_marker(skip)


@pytest.fixture(scope="session")
def k8s_clients():
    config.load_kube_config()
    return {
        "apps_v1": client.AppsV1Api(),
        "core_v1": client.CoreV1Api(),
        "custom_objects_api": client.CustomObjectsApi(),
    }


@pytest.fixture(scope="session")
def test_namespace(k8s_clients):
    core_v1 = k8s_clients["core_v1"]
    api_extensions_v1 = client.ApiextensionsV1Api()

    try:
        api_extensions_v1.create_custom_resource_definition(body=build_crd())
        print(f"✅ Created CRD {CRD_NAME_DEVNET}")
        time.sleep(2)
    except client.ApiException as e:
        if e.status != 409:
            raise

    try:
        core_v1.create_namespace(client.V1Namespace(metadata=client.V1ObjectMeta(name=E2E_NAMESPACE)))
    except client.ApiException as e:
        if e.status != 409:
            raise

    yield E2E_NAMESPACE

    print(f"🧹 Deleting test namespace {E2E_NAMESPACE}")
    try:
        core_v1.delete_namespace(name=E2E_NAMESPACE)
    except client.ApiException as e:
        if e.status != 404:
            raise


@pytest.fixture(scope="session")
def operator_running(test_namespace):
    """Runs the operator as a daemon thread for the whole session."""
    import ryogoku.operator  # noqa: F401

    stop_flag = threading.Event()

    def run_operator():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            loop.run_until_complete(
                kopf.operator(
                    registry=kopf.get_default_registry(),
                    standalone=True,
                    namespaces=[test_namespace],
                    stop_flag=stop_flag,
                )
            )
        finally:
            loop.close()

    thread = threading.Thread(target=run_operator, daemon=True)
    thread.start()
    print("⏳ Waiting for operator to start...")
    time.sleep(5)

    yield

    stop_flag.set()
    thread.join(timeout=30)
