"""BuildShip CLI commands"""
