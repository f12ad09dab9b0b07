"""ModShop: a modular product/order REST API built from independently registered packages."""
