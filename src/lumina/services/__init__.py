"""Application services composed from the analysis and diagram layers."""
