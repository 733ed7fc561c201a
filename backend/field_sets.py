from backend.exceptions import InvalidRequest, NotFound


class FieldSet:
    """Whitelist of updatable columns for partial updates.

    ``build`` keeps only recognised fields from already-validated data, in
    the declared order, so the same request always yields the same UPDATE.
    An empty result is rejected rather than issuing a no-op write.
    """

    def __init__(self, *fields):
        self.fields = tuple(fields)

    def build(self, validated_data):
        updates = {
            name: validated_data[name] for name in self.fields if name in validated_data
        }
        if not updates:
            raise InvalidRequest("No valid fields provided for update.")
        return updates

    def apply(self, queryset, validated_data, **extra):
        """Run a single parameterised UPDATE against ``queryset``.

        ``extra`` carries server-side columns such as ``updated_at`` that are
        written alongside the client's fields. Raises ``NotFound`` when the
        queryset matched nothing.
        """
        updates = self.build(validated_data)
        updates.update(extra)
        if not queryset.update(**updates):
            raise NotFound()
        return updates
