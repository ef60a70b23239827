# tests/test_api.py
import logging

from app.shared.schemas.records import DeviceStatus


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_add_device_endpoint(client, gateway):
    response = client.post("/api/v1/inventory/devices", json={"model": "iPhone 15", "imei": "123456789012"})

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["refresh_required"] is True
    assert body["device"]["status"] == "disponible"
    assert len(gateway.devices) == 1


def test_add_device_validation_error(client, gateway):
    response = client.post("/api/v1/inventory/devices", json={"model": "iPhone 15", "imei": "12345"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["details"] == {"field": "imei"}
    assert gateway.calls == []


def test_list_devices_with_search(client, gateway):
    gateway.add_device("iPhone 15", "123456789012")
    gateway.add_device("Moto G", "9876543210")

    response = client.get("/api/v1/inventory/devices", params={"search": "moto"})

    body = response.json()
    assert body["count"] == 1
    assert body["devices"][0]["model"] == "Moto G"


def test_available_devices_endpoint(client, gateway):
    gateway.add_device("A", "1111111111", status=DeviceStatus.SOLD)
    available = gateway.add_device("B", "2222222222")

    body = client.get("/api/v1/inventory/devices/available").json()

    assert [d["id"] for d in body["devices"]] == [available.id]


def test_register_sale_endpoint(client, gateway):
    device = gateway.add_device()

    response = client.post("/api/v1/sales", json={
        "device_id": device.id,
        "client_name": "Ana",
        "client_phone": "5512345678",
        "channel": "Local",
        "down_payment": 500
    })

    assert response.status_code == 201
    body = response.json()
    assert body["outcome"] == "success"
    assert body["sale"]["model"] == "iPhone 15"
    assert gateway.status_of(device.id) == DeviceStatus.SOLD

    sales = client.get("/api/v1/sales").json()
    assert sales["count"] == 1
    assert sales["sales"][0]["imei"] == "123456789012"


def test_register_sale_with_bad_phone(client, gateway):
    device = gateway.add_device()

    response = client.post("/api/v1/sales", json={
        "device_id": device.id, "client_name": "Ana", "client_phone": "12345"
    })

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "client_phone"}
    assert gateway.calls == []


def test_register_sale_gateway_error(client, gateway):
    device = gateway.add_device()
    gateway.fail_on.add("create_sale")

    response = client.post("/api/v1/sales", json={
        "device_id": device.id, "client_name": "Ana", "client_phone": "5512345678"
    })

    assert response.status_code == 502
    assert response.json()["error_code"] == "GATEWAY_ERROR"


def test_register_sale_partial_failure_then_reconcile(client, gateway):
    device = gateway.add_device()
    gateway.fail_on.add("set_device_status")

    response = client.post("/api/v1/sales", json={
        "device_id": device.id, "client_name": "Ana", "client_phone": "5512345678"
    })

    assert response.status_code == 502
    body = response.json()
    assert body["error_code"] == "PARTIAL_SALE"
    assert body["details"]["sale_id"] == gateway.sales[0].id
    assert body["details"]["device_id"] == device.id

    anomalies = client.get("/api/v1/sales/anomalies").json()
    assert anomalies["total"] == 1

    gateway.fail_on.clear()
    response = client.post(f"/api/v1/sales/devices/{device.id}/complete")
    assert response.status_code == 200
    assert response.json()["status"] == "vendido"
    assert client.get("/api/v1/sales/anomalies").json()["total"] == 0


def test_partial_sale_is_logged_once_as_error(client, gateway, caplog):
    device = gateway.add_device()
    gateway.fail_on.add("set_device_status")

    with caplog.at_level(logging.INFO):
        response = client.post("/api/v1/sales", json={
            "device_id": device.id, "client_name": "Ana", "client_phone": "5512345678"
        })

    sale_id = response.json()["details"]["sale_id"]
    errors = [
        r for r in caplog.records
        if r.levelno >= logging.ERROR and sale_id in r.getMessage()
    ]
    assert len(errors) == 1
    assert errors[0].name == "app.modules.sales.service"


def test_register_sale_with_oversized_down_payment(client, gateway):
    device = gateway.add_device()

    response = client.post("/api/v1/sales", json={
        "device_id": device.id, "client_name": "Ana", "client_phone": "5512345678", "down_payment": "1e30"
    })

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert body["details"] == {"field": "down_payment"}
    assert gateway.calls == []


def test_request_log_is_in_spanish(client, caplog):
    with caplog.at_level(logging.INFO, logger="app.core.middleware"):
        client.get("/health")

    messages = [r.getMessage() for r in caplog.records if r.name == "app.core.middleware"]
    assert len(messages) == 1
    assert messages[0].startswith("GET /health - Estado: 200 - Tiempo: ")


def test_selling_a_sold_device_conflicts(client, gateway):
    device = gateway.add_device(status=DeviceStatus.SOLD)

    response = client.post("/api/v1/sales", json={
        "device_id": device.id, "client_name": "Ana", "client_phone": "5512345678"
    })

    assert response.status_code == 409
    assert response.json()["error_code"] == "DEVICE_UNAVAILABLE"


def test_sale_channels(client):
    body = client.get("/api/v1/sales/channels").json()

    assert body["channels"] == ["Local", "Facebook", "Referido", "WhatsApp"]
    assert body["default"] == "Local"


def test_export_csv_without_sales(client):
    response = client.get("/api/v1/reports/sales.csv")

    assert response.status_code == 404
    assert response.json()["message"] == "No hay ventas registradas para exportar."


def test_export_csv_download(client, gateway):
    device = gateway.add_device()
    client.post("/api/v1/sales", json={
        "device_id": device.id, "client_name": "Ana", "client_phone": "5512345678", "down_payment": "100"
    })

    response = client.get("/api/v1/reports/sales.csv")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "ventas_celcontrol_pro_" in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "Cliente,Modelo,IMEI,Canal,Enganche,Fecha"
    assert lines[1].startswith('"Ana","iPhone 15","123456789012","Local",100.00,')


def test_summary_endpoint(client, gateway):
    gateway.add_device()

    body = client.get("/api/v1/reports/summary").json()

    assert body["devices_in_stock"] == 1
    assert body["total_sales"] == 0
