"""
Recommendation engine: converts trainset snapshots into recommended
operational statuses with confidence, priority, reasoning and risk factors.

Modules
-------
classifier : STATUS_RULES table + classify() + compute_readiness_score()
             + build_risk_factors() — pure functions, no I/O.
fleet      : FleetEntry / AdvisedTrainset + classify_fleet() +
             summarize_fleet() — order-preserving fleet processing.
reporter   : write_recommendation_csv() + write_recommendation_json()
             + write_summary_json() — file output.
"""
