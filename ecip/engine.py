"""Two-pass divisor product engine.

Computes the divisor f(x, y) = a(x) - y*b(x) of an ordered point sequence
with a single field inversion per run:

1. Setup: map every point to Jacobian coordinates (inversion-free), check the
   domain is large enough for the degree bound.
2. Pass 1 (collect): walk the merge schedule computing Jacobian partial sums.
   Every inversion the run needs (1/Z of the inputs, chord slopes, vertical
   line denominators) is recorded as a pending inversion.
3. Resolve: one Montgomery batch inversion over all pending operands.
4. Pass 2 (consume): walk the same schedule in affine coordinates, building
   LineDivisor leaves and merging divisors in evaluation form, taking each
   reciprocal at the site that recorded it.
5. Interpolate the root divisor once.

Every node divisor vanishes at its points and at minus their sum S. Merging
nodes with sums S1, S2 multiplies in the chord through S1, S2 (zeros at S1,
S2, -(S1 + S2)) and divides out the vertical lines through S1 and S2 (zeros
at +-S1, +-S2), leaving the union of points plus -(S1 + S2). When S1 == S2
the tangent at S1 takes the place of the chord.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import galois

from ecip.config import DEFAULT_DOMAIN_SIZE, DivisorConfig, required_domain_size
from ecip.divisor import Divisor, LineDivisor
from ecip.inversion import InversionQueue, ResolvedInversions, RunStats, Site
from ecip.schedule import Leaf, MergeSchedule
from primitives.affine import PointFormat, require_format
from primitives.curve import INF, AffinePoint, CurveParams, JacPoint
from primitives.domain import EvaluationDomain, trim
from primitives.errors import DegreeOverflow

logger = logging.getLogger(__name__)

AFFINE_SITE = Site("affine", -1)


# --- Node Kinds ---

class NodeKind(Enum):
    """How a schedule node is built, decided in pass 1 and replayed in pass 2."""
    ONE = "one"            # leaf without finite points
    VERTICAL = "vertical"  # vertical line, or merge of opposite sums
    CHORD = "chord"        # line through two points of distinct x
    TANGENT = "tangent"    # merge of equal partial sums
    ABSORB = "absorb"      # merge where one side sums to infinity


# --- Engine ---

class DivisorEngine:
    """Divisor product engine for one curve and domain.

    The domain, its barycentric weights and the curve relation evaluations are
    built once here and only read by runs. By default the domain is
    0..domain_size-1; pass an EvaluationDomain (e.g. from
    EvaluationDomain.from_points) to evaluate elsewhere.
    """

    def __init__(
        self,
        curve: CurveParams,
        config: Optional[DivisorConfig] = None,
        domain: Optional[EvaluationDomain] = None,
    ) -> None:
        self.curve = curve
        if domain is None:
            self.config = config if config is not None else DivisorConfig()
            self.domain = EvaluationDomain(curve.field, self.config.domain_size)
        else:
            if domain.field is not curve.field:
                raise ValueError("Domain and curve must share a field")
            self.config = DivisorConfig(domain_size=domain.n)
            self.domain = domain
        # x^3 + A*x + B over the domain, substituted for y^2 in every product
        self.relation = curve.relation(self.domain.points)
        self.last_stats: Optional[RunStats] = None

    def __repr__(self) -> str:
        return f"DivisorEngine({self.curve!r}, domain_size={self.domain.n})"

    def compute(self, points: Sequence[Any]) -> Tuple[galois.FieldArray, galois.FieldArray]:
        """Coefficients (a, b) of the divisor of points, ascending order.

        Raises:
            CapabilityError: Point format missing or a point of the wrong shape
            DegreeOverflow: Domain too small for len(points)
            Undefined: Degenerate input (identical points inside a leaf or a
                zero chord), or a partial sum whose x coordinate is a domain
                point: its vertical line vanishes there and cannot be divided
                out pointwise. With the default domain 0..n-1 this hits
                valid input only when some x(S) < n; build the engine with
                a domain from EvaluationDomain.from_points away from such
                points to avoid it.
        """
        divisor = self.compute_divisor(points)
        return self.interpolate(divisor)

    def compute_divisor(self, points: Sequence[Any]) -> Divisor:
        """Root divisor of points in evaluation form."""
        jac = self._prepare(points)
        schedule = MergeSchedule(len(jac))
        if schedule.root is None:
            self.last_stats = RunStats()
            return Divisor.one(self.relation)

        queue, kinds = self._collect(jac, schedule)
        resolved = queue.resolve()
        root = self._consume(jac, schedule, kinds, resolved)
        resolved.finish()

        self.last_stats = resolved.stats
        logger.debug(
            "%s: %d points, %d merges, %d sites, %d operands, %d inversion(s)",
            self.curve.name, len(jac), len(schedule.merges),
            resolved.stats.sites, resolved.stats.operands, resolved.stats.inversions,
        )
        return root

    def interpolate(self, divisor: Divisor) -> Tuple[galois.FieldArray, galois.FieldArray]:
        """The single interpolation of a run."""
        a = trim(self.domain.interpolate(divisor.a))
        b = trim(self.domain.interpolate(divisor.b))
        return a, b

    # --- Setup ---

    def _prepare(self, points: Sequence[Any]) -> List[JacPoint]:
        point_format: PointFormat = require_format(self.curve)
        jac = [point_format.to_jacobian(P, self.curve) for P in points]
        for i, Q in enumerate(jac):
            if not self.curve.is_on_curve_jac(Q):
                raise ValueError(f"Point {i} is not on {self.curve.name}")

        required = required_domain_size(len(jac))
        if self.domain.n < required:
            raise DegreeOverflow(
                f"{len(jac)} points need a domain of at least {required}, got {self.domain.n}"
            )
        return jac

    # --- Pass 1 ---

    def _collect(
        self,
        jac: List[JacPoint],
        schedule: MergeSchedule,
    ) -> Tuple[InversionQueue, Dict[int, NodeKind]]:
        """Compute Jacobian partial sums and record every pending inversion."""
        curve = self.curve
        queue = InversionQueue(curve.field)
        queue.defer(AFFINE_SITE, self.curve.point_format.conversion_operands(jac, curve))

        kinds: Dict[int, NodeKind] = {}
        sums: Dict[int, JacPoint] = {}
        for step in schedule.walk():
            if isinstance(step, Leaf):
                finite = [jac[i] for i in step.points if jac[i][2] != 0]
                if len(finite) == 0:
                    kinds[step.node] = NodeKind.ONE
                    sums[step.node] = curve.infinity_jac()
                elif len(finite) == 1:
                    kinds[step.node] = NodeKind.VERTICAL
                    sums[step.node] = finite[0]
                else:
                    Q, R = finite
                    kinds[step.node] = self._defer_pair(queue, step.node, Q, R, denominators=False)
                    sums[step.node] = curve.add_jac(Q, R)
                continue

            Q = sums.pop(step.left)
            R = sums.pop(step.right)
            if Q[2] == 0 or R[2] == 0:
                kinds[step.node] = NodeKind.ABSORB
            else:
                kinds[step.node] = self._defer_pair(queue, step.node, Q, R, denominators=True)
            sums[step.node] = curve.add_jac(Q, R)

        return queue, kinds

    def _defer_pair(
        self,
        queue: InversionQueue,
        node: int,
        Q: JacPoint,
        R: JacPoint,
        denominators: bool,
    ) -> NodeKind:
        """Classify a pair of finite points and defer the inversions it needs.

        In Jacobian terms x_R - x_Q = H / (Z_Q^2 * Z_R^2) with
        H = X_R*Z_Q^2 - X_Q*Z_R^2, 2*y_Q = 2*Y_Q / Z_Q^3 and
        d - x_Q = (d*Z_Q^2 - X_Q) / Z_Q^2.
        Equal partial sums of a merge take the tangent slope. Identical
        points inside a leaf stay on the chord path with H == 0, which fails
        the batch.
        """
        QZ2 = Q[2] * Q[2]
        RZ2 = R[2] * R[2]
        H = R[0] * QZ2 - Q[0] * RZ2
        d = self.domain.points

        kind = NodeKind.CHORD
        if H == 0:
            QY = Q[1] * RZ2 * R[2]
            RY = R[1] * QZ2 * Q[2]
            if QY == -RY:
                if denominators:
                    queue.defer(Site("denominator", node), d * QZ2 - Q[0], QZ2)
                return NodeKind.VERTICAL
            if denominators:
                kind = NodeKind.TANGENT

        scale = QZ2 * RZ2
        if kind is NodeKind.TANGENT:
            queue.defer(Site("slope", node), self.curve.field(2) * Q[1], QZ2 * Q[2])
        else:
            queue.defer(Site("slope", node), H, scale)
        if denominators:
            # (d - x_Q)^2 for a tangent, since x_Q == x_R
            queue.defer(Site("denominator", node), (d * QZ2 - Q[0]) * (d * RZ2 - R[0]), scale)
        return kind

    # --- Pass 2 ---

    def _consume(
        self,
        jac: List[JacPoint],
        schedule: MergeSchedule,
        kinds: Dict[int, NodeKind],
        resolved: ResolvedInversions,
    ) -> Divisor:
        """Build and merge divisors in evaluation form."""
        point_format = self.curve.point_format
        affine = point_format.from_reciprocals(jac, resolved.take(AFFINE_SITE))

        nodes: Dict[int, Union[Divisor, LineDivisor]] = {}
        sums: Dict[int, AffinePoint] = {}
        for step in schedule.walk():
            kind = kinds[step.node]
            if isinstance(step, Leaf):
                finite = [affine[i] for i in step.points if affine[i] is not INF]
                if kind is NodeKind.ONE:
                    nodes[step.node] = Divisor.one(self.relation)
                    sums[step.node] = INF
                elif kind is NodeKind.VERTICAL:
                    P = finite[0]
                    nodes[step.node] = LineDivisor.vertical_at(self.domain, self.relation, P[0])
                    sums[step.node] = P if len(finite) == 1 else INF
                else:
                    P, Q = finite
                    nodes[step.node], sums[step.node] = self._chord(resolved, step.node, P, Q)
                continue

            left, right = nodes.pop(step.left), nodes.pop(step.right)
            S1, S2 = sums.pop(step.left), sums.pop(step.right)
            product = left * right
            if kind is NodeKind.ABSORB:
                nodes[step.node] = product
                sums[step.node] = S2 if S1 is INF else S1
            elif kind is NodeKind.VERTICAL:
                # chord is x - x1 and cancels one of the two verticals
                reciprocals = resolved.take(Site("denominator", step.node))
                nodes[step.node] = product.divide(reciprocals, 1)
                sums[step.node] = INF
            elif kind is NodeKind.TANGENT:
                line, total = self._tangent(resolved, step.node, S1)
                reciprocals = resolved.take(Site("denominator", step.node))
                nodes[step.node] = (product * line).divide(reciprocals, 2)
                sums[step.node] = total
            else:
                line, total = self._chord(resolved, step.node, S1, S2)
                reciprocals = resolved.take(Site("denominator", step.node))
                nodes[step.node] = (product * line).divide(reciprocals, 2)
                sums[step.node] = total

        root = nodes[schedule.root]
        if isinstance(root, LineDivisor):
            root = root.to_divisor()
        return root

    def _chord(
        self,
        resolved: ResolvedInversions,
        node: int,
        P: AffinePoint,
        Q: AffinePoint,
    ) -> Tuple[LineDivisor, AffinePoint]:
        """Chord through P, Q and the sum P + Q, from the resolved 1/(xQ - xP)."""
        inv = resolved.take_scalar(Site("slope", node))
        m = (Q[1] - P[1]) * inv
        c = P[1] - m * P[0]
        x3 = m * m - P[0] - Q[0]
        y3 = m * (P[0] - x3) - P[1]
        return LineDivisor.chord(self.domain, self.relation, m, c), (x3, y3)

    def _tangent(
        self,
        resolved: ResolvedInversions,
        node: int,
        P: AffinePoint,
    ) -> Tuple[LineDivisor, AffinePoint]:
        """Tangent at P and 2P, from the resolved 1/(2*yP)."""
        F = self.curve.field
        inv = resolved.take_scalar(Site("slope", node))
        m = (F(3) * P[0] * P[0] + self.curve.A) * inv
        c = P[1] - m * P[0]
        x3 = m * m - P[0] - P[0]
        y3 = m * (P[0] - x3) - P[1]
        return LineDivisor.chord(self.domain, self.relation, m, c), (x3, y3)


def compute_divisor_product(
    points: Sequence[Any],
    curve: CurveParams,
    domain_size: int = DEFAULT_DOMAIN_SIZE,
) -> Tuple[galois.FieldArray, galois.FieldArray]:
    """Coefficients (a, b) with f(x, y) = a(x) - y*b(x) for points on curve."""
    engine = DivisorEngine(curve, DivisorConfig(domain_size=domain_size))
    return engine.compute(points)
