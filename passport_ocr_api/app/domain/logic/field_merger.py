from typing import Dict, Tuple

from app.domain.models.passport_fields import FIELD_NAMES, ExtractedFields, FieldOrigin


class FieldMerger:
    """Combines MRZ and visual-zone results; a non-empty MRZ value always wins."""

    def merge(self, mrz_fields: ExtractedFields, visual_fields: ExtractedFields) -> ExtractedFields:
        merged, _ = self.merge_with_origin(mrz_fields, visual_fields)
        return merged

    def merge_with_origin(
        self,
        mrz_fields: ExtractedFields,
        visual_fields: ExtractedFields,
    ) -> Tuple[ExtractedFields, Dict[str, FieldOrigin]]:
        values: Dict[str, str] = {}
        origins: Dict[str, FieldOrigin] = {}
        for name in FIELD_NAMES:
            mrz_value = getattr(mrz_fields, name)
            visual_value = getattr(visual_fields, name)
            if mrz_value:
                values[name], origins[name] = mrz_value, FieldOrigin.MRZ
            elif visual_value:
                values[name], origins[name] = visual_value, FieldOrigin.VISUAL
            else:
                values[name], origins[name] = "", FieldOrigin.NONE
        return ExtractedFields(**values), origins
