"""Core module for HistoFit - histograms, data sources and fitting logic."""
