"""Schedule inputs: record contract and bundle loaders."""
