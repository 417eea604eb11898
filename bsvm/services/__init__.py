"""Services: catalog, resolution, install and uninstall, clone sync."""
