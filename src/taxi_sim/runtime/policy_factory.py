from taxi_sim.app.protocols import ColorPolicy, PricingPolicy, SizingPolicy
from taxi_sim.config.models import (
    DeliveryModel,
    PricingPolicyDistanceModel,
    PricingPolicyUnion,
    SizingPolicyDistanceBucketsModel,
    SizingPolicyUnion,
)
from taxi_sim.policy.palette import PaletteColorPolicy
from taxi_sim.policy.pricing import DistancePricingPolicy
from taxi_sim.policy.sizing import DistanceBucketSizingPolicy
from taxi_sim.sim.rng import RNGRegistry


def make_pricing_policy(cfg: PricingPolicyUnion) -> PricingPolicy:
    if isinstance(cfg, PricingPolicyDistanceModel):
        return DistancePricingPolicy(base=cfg.base, rate=cfg.rate, tier_scale=cfg.tier_scale)
    else:
        raise TypeError(cfg)


def make_sizing_policy(cfg: SizingPolicyUnion, *, rng_registry: RNGRegistry) -> SizingPolicy:
    if isinstance(cfg, SizingPolicyDistanceBucketsModel):
        return DistanceBucketSizingPolicy(
            rng=rng_registry.stream("sizing"), bounds=cfg.bounds, weights=cfg.weights
        )
    else:
        raise TypeError(cfg)


def make_color_policy(cfg: DeliveryModel, *, rng_registry: RNGRegistry) -> ColorPolicy:
    return PaletteColorPolicy(rng=rng_registry.stream("palette"), colors=cfg.palette)
