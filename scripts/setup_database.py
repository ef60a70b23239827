# scripts/setup_database.py
"""
Crear tablas equipos/ventas y, opcionalmente, cargar equipos de demostración
Ejecutar desde la raíz del proyecto: python scripts/setup_database.py [--demo]
"""
import sys

from app.config.database import SessionLocal, init_db
from app.shared.services.sql_gateway import SqlDataGateway

DEMO_DEVICES = [
    ("iPhone 15 Pro Max", "356789101112131"),
    ("Samsung Galaxy S24", "351234567890123"),
    ("Motorola Edge 40", "359876543210987"),
]


def setup_database(with_demo: bool = False) -> bool:
    print("🔧 Creando tablas...")
    init_db()
    print("✅ Tablas equipos/ventas listas")

    if not with_demo:
        return True

    db = SessionLocal()
    try:
        gateway = SqlDataGateway(db)
        if gateway.list_devices():
            print("📦 Ya hay equipos registrados, no se cargan demos")
            return True

        for model, imei in DEMO_DEVICES:
            device = gateway.create_device(model, imei)
            print(f"✅ Equipo creado: {device.model} - {device.imei}")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    ok = setup_database(with_demo="--demo" in sys.argv)
    sys.exit(0 if ok else 1)
