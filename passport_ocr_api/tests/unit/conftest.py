import cv2
import numpy as np
import pytest

from app.services.recognition import RecognitionClient


MRZ_LINE1 = "P<CHNZHANG<<SAN<<<<<<<<<<<<<<<<<<<<<<<<<<<<<"
MRZ_LINE2 = "E123456783CHN8505154M3105149<<<<<<<<<<<<<<02"

VISUAL_ZONE = """中华人民共和国
PEOPLE'S REPUBLIC OF CHINA
护照 PASSPORT
类型/Type 国家码/Country Code 护照号/Passport No.
P CHN E12345678
姓名/Name
ZHANG, SAN
性别/Sex 出生地点/Place of birth
男/M 广东/GUANGDONG
出生日期/Date of birth
15 5月/MAY 1985
签发日期/Date of issue 有效期至/Date of expiry
15 5月/MAY 2021 14 5月/MAY 2031"""


class ScriptedRecognitionClient(RecognitionClient):
    """Returns canned text (or raises a canned error) and records its inputs."""

    def __init__(self, text: str = "", error: Exception = None):
        super().__init__()
        self.text = text
        self.error = error
        self.calls = []

    def recognize(self, image_bytes: bytes) -> str:
        self._ensure_initialized()
        self.calls.append(image_bytes)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def visual_zone_text():
    return VISUAL_ZONE


@pytest.fixture
def mrz_lines():
    return MRZ_LINE1, MRZ_LINE2


@pytest.fixture
def page_text():
    # visual zone first, MRZ at the bottom of the page
    return f"{VISUAL_ZONE}\n{MRZ_LINE1}\n{MRZ_LINE2}\n"


@pytest.fixture
def recognition_client():
    client = ScriptedRecognitionClient()
    client.initialize()
    yield client
    client.shutdown()


@pytest.fixture(scope="module")
def shared_recognition_client():
    return ScriptedRecognitionClient()


@pytest.fixture
def png_bytes():
    # small BGR photo with a blue block in the corner
    image = np.full((20, 30, 3), 255, dtype=np.uint8)
    image[:5, :5] = (255, 0, 0)
    success, encoded = cv2.imencode('.png', image)
    assert success
    return encoded.tobytes()
