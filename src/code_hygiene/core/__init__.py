"""Engine core: configuration, discovery, clock sources and orchestration."""
