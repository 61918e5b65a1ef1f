"""
Static reference tables used by the visual-zone scanner.

Tables are keyed by nationality code so another issuing state can be added
without touching the scanner. Only CHN ships today.
"""
from typing import Dict, Tuple

# (transliterated name, native-script name); checked in this order, so longer
# names that contain a shorter one must come first.
PLACE_GAZETTEER: Dict[str, Tuple[Tuple[str, str], ...]] = {
    'CHN': (
        ('INNER MONGOLIA', '内蒙古'),
        ('HEILONGJIANG', '黑龙江'),
        ('GUANGDONG', '广东'),
        ('CHONGQING', '重庆'),
        ('HONG KONG', '香港'),
        ('SHANGHAI', '上海'),
        ('XINJIANG', '新疆'),
        ('LIAONING', '辽宁'),
        ('ZHEJIANG', '浙江'),
        ('SHANDONG', '山东'),
        ('SHAANXI', '陕西'),
        ('BEIJING', '北京'),
        ('TIANJIN', '天津'),
        ('JIANGSU', '江苏'),
        ('JIANGXI', '江西'),
        ('GUANGXI', '广西'),
        ('SICHUAN', '四川'),
        ('GUIZHOU', '贵州'),
        ('QINGHAI', '青海'),
        ('NINGXIA', '宁夏'),
        ('SHANXI', '山西'),
        ('FUJIAN', '福建'),
        ('HAINAN', '海南'),
        ('YUNNAN', '云南'),
        ('XIZANG', '西藏'),
        ('TAIWAN', '台湾'),
        ('HEBEI', '河北'),
        ('JILIN', '吉林'),
        ('ANHUI', '安徽'),
        ('HENAN', '河南'),
        ('HUBEI', '湖北'),
        ('HUNAN', '湖南'),
        ('GANSU', '甘肃'),
        ('MACAO', '澳门'),
    ),
}

# Words other than the code itself that mark a line as stating nationality.
NATIONALITY_ALIASES: Dict[str, Tuple[str, ...]] = {
    'CHN': ('CHINESE', '中国'),
}

# Uppercase labels that look like "WORD, WORD" but are not names.
NON_NAME_LABELS = frozenset({
    'TYPE', 'SEX', 'COUNTRY', 'CODE', 'PASSPORT', 'NAME', 'SURNAME',
    'NATIONALITY', 'AUTHORITY', 'DATE', 'PLACE',
})

MALE_MARKERS = ('男',)
FEMALE_MARKERS = ('女',)
