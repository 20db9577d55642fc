"""
Gates of one Keccak-f round, each a config with configure() and an
assign method.

Modules:
    tables          — 13 -> 9, special chunk and 9 -> 13 lookup tables
    theta           — ThetaConfig
    rho_helpers     — chunk slicing and the RhoLane witness
    rho_checks      — LaneRotateConversionConfig, SumConfig, BlockCountFinalConfig
    rho             — RhoConfig over all 25 lanes
    pi              — PiConfig
    xi              — XiConfig
    iota_b9         — IotaB9Config (every round, finalize branch)
    iota_b13        — IotaB13Config (absorb branch)
    absorb          — AbsorbConfig
    base_conversion — StateBaseConversion (base 9 → 13)
    mixing          — MixingConfig
"""
