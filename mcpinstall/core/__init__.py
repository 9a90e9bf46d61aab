"""Install flow: path resolution, backups and the two install methods."""
