"""
mdpress - Markdown/HTML 文档组装与 PDF 输出

模块结构：
- config/     运行期配置与任务配置加载
- models/     数据模型定义
- render/     源文件解析/合并/Markdown转换/图片内嵌/外壳包装/PDF渲染
- pipeline/   任务执行、产物发布、模板批量填充
- dashboard/  产物目录（HTML/Markdown）
- cli         命令行入口
"""

__version__ = "0.1.0"
